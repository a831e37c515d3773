from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest

from videotube.core.security import TokenService, hash_password, subject_id, verify_password


@pytest.fixture
def tokens(settings):
    return TokenService(settings)


@pytest.fixture
def user():
    return SimpleNamespace(id=7, email="alice@example.com", username="alice", full_name="Alice")


def test_password_hash_round_trip():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("other", hashed)
    assert not verify_password("", hashed)


def test_access_token_claims(tokens, user):
    payload = tokens.decode_access_token(tokens.create_access_token(user))
    assert payload["sub"] == "7"
    assert payload["username"] == "alice"
    assert payload["fullName"] == "Alice"
    assert subject_id(payload) == 7


def test_refresh_token_carries_only_the_id(tokens, user):
    payload = tokens.decode_refresh_token(tokens.create_refresh_token(user))
    assert payload["sub"] == "7"
    assert "email" not in payload


def test_tokens_minted_together_differ(tokens, user):
    assert tokens.create_refresh_token(user) != tokens.create_refresh_token(user)


def test_secrets_are_not_interchangeable(tokens, user):
    with pytest.raises(jwt.InvalidSignatureError):
        tokens.decode_refresh_token(tokens.create_access_token(user))


def test_expired_token(tokens, user):
    token = tokens.create_access_token(user, expires_delta=timedelta(seconds=-5))
    with pytest.raises(jwt.ExpiredSignatureError):
        tokens.decode_access_token(token)


def test_subject_id_rejects_non_numeric():
    assert subject_id({"sub": "abc"}) is None
    assert subject_id({}) is None
