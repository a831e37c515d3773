from videotube.db.models.user import User

from conftest import API, DEFAULT_PASSWORD, bearer


def test_current_user(signed_in, client):
    user, access, _ = signed_in("alice")
    res = client.get(f"{API}/current-user", headers=bearer(access))
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["id"] == user["id"]
    assert "hashedPassword" not in data
    assert "refreshToken" not in data


def test_change_password_with_wrong_old_password(signed_in, client, login, db):
    user, access, _ = signed_in("bob")
    before = db.get(User, user["id"]).hashed_password

    res = client.post(
        f"{API}/change-password",
        json={"oldPassword": "not it", "newPassword": "brand new"},
        headers=bearer(access),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid old password"

    db.expire_all()
    assert db.get(User, user["id"]).hashed_password == before
    assert login("bob").status_code == 200


def test_change_password(signed_in, client, login):
    _, access, _ = signed_in("carol")

    res = client.post(
        f"{API}/change-password",
        json={"oldPassword": DEFAULT_PASSWORD, "newPassword": "brand new"},
        headers=bearer(access),
    )
    assert res.status_code == 200
    assert "brand new" not in res.text

    assert login("carol", password="brand new").status_code == 200
    assert login("carol").status_code == 401


def test_change_password_requires_both_fields(signed_in, client):
    _, access, _ = signed_in("dave")
    res = client.post(f"{API}/change-password", json={"oldPassword": DEFAULT_PASSWORD}, headers=bearer(access))
    assert res.status_code == 400


def test_update_details_keeps_omitted_fields(signed_in, client):
    user, access, _ = signed_in("erin")
    res = client.patch(f"{API}/update-details", json={"fullName": "Erin Example"}, headers=bearer(access))
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["fullName"] == "Erin Example"
    assert data["email"] == user["email"]


def test_update_email(signed_in, client):
    _, access, _ = signed_in("frank")
    res = client.patch(f"{API}/update-details", json={"email": "Frank@New.example.com"}, headers=bearer(access))
    assert res.status_code == 200
    assert res.json()["data"]["email"] == "frank@new.example.com"


def test_update_details_requires_a_field(signed_in, client):
    _, access, _ = signed_in("grace")
    res = client.patch(f"{API}/update-details", json={}, headers=bearer(access))
    assert res.status_code == 400
    assert res.json()["message"] == "Full name or email is required"


def test_update_details_rejects_taken_email(signed_in, register, client):
    register("heidi", email="heidi@example.com")
    _, access, _ = signed_in("ivan")
    res = client.patch(f"{API}/update-details", json={"email": "heidi@example.com"}, headers=bearer(access))
    assert res.status_code == 409


def test_update_details_rejects_invalid_email(signed_in, client):
    _, access, _ = signed_in("judy")
    res = client.patch(f"{API}/update-details", json={"email": "not-an-email"}, headers=bearer(access))
    assert res.status_code == 400
    assert res.json()["errors"]


def test_update_avatar(signed_in, client):
    user, access, _ = signed_in("mallory")
    res = client.patch(
        f"{API}/update-avatar",
        files={"avatar": ("new.png", b"new avatar", "image/png")},
        headers=bearer(access),
    )
    assert res.status_code == 200
    assert res.json()["data"]["avatar"] != user["avatar"]


def test_update_avatar_requires_file(signed_in, client):
    _, access, _ = signed_in("niaj")
    res = client.patch(f"{API}/update-avatar", headers=bearer(access))
    assert res.status_code == 400
    assert res.json()["message"] == "Avatar file is missing"


def test_update_avatar_upload_failure(signed_in, client, uploader):
    _, access, _ = signed_in("olivia")
    uploader.fail = True
    res = client.patch(
        f"{API}/update-avatar",
        files={"avatar": ("new.png", b"new avatar", "image/png")},
        headers=bearer(access),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Error while uploading avatar"


def test_update_cover(signed_in, client):
    _, access, _ = signed_in("peggy")
    res = client.patch(
        f"{API}/update-cover",
        files={"coverImage": ("cover.jpg", b"cover", "image/jpeg")},
        headers=bearer(access),
    )
    assert res.status_code == 200
    assert res.json()["data"]["coverImage"].startswith("https://media.example.com/")


def test_update_cover_requires_file(signed_in, client):
    _, access, _ = signed_in("rupert")
    res = client.patch(f"{API}/update-cover", headers=bearer(access))
    assert res.status_code == 400
    assert res.json()["message"] == "Cover image file is missing"


def test_change_password_with_form_fields(signed_in, client, login):
    _, access, _ = signed_in("quinn")

    res = client.post(
        f"{API}/change-password",
        data={"oldPassword": DEFAULT_PASSWORD, "newPassword": "form secret"},
        headers=bearer(access),
    )
    assert res.status_code == 200
    assert login("quinn", password="form secret").status_code == 200


def test_update_details_with_form_fields(signed_in, client):
    _, access, _ = signed_in("rita")
    res = client.patch(f"{API}/update-details", data={"fullName": "Rita Form"}, headers=bearer(access))
    assert res.status_code == 200
    assert res.json()["data"]["fullName"] == "Rita Form"
