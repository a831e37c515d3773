# ============================================================================
# FILE: videotube/api/dependencies.py
# ============================================================================
from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from pydantic import BaseModel, ValidationError
from typing import Optional, Type
import json
import jwt
from videotube.config import Settings
from videotube.core.errors import ApiError
from videotube.core.media import MediaUploader
from videotube.core.security import TokenService, subject_id
from videotube.db.models.user import User
from videotube.db.session import get_db
from videotube.services.user_service import user_service

bearer_scheme = HTTPBearer(auto_error=False)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service

def get_media_uploader(request: Request) -> MediaUploader:
    return request.app.state.media_uploader

def require_current_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """
    Authenticated user from the access token (cookie first, then Bearer header)
    Raises 401 on a missing, invalid or expired token, or an unknown user
    """
    token = request.cookies.get(ACCESS_COOKIE) or (creds.credentials if creds else None)
    if not token:
        raise ApiError(401, "Unauthorized request")

    try:
        payload = tokens.decode_access_token(token)
    except jwt.PyJWTError as e:
        raise ApiError(401, str(e) or "Invalid access token")

    user_id = subject_id(payload)
    user = user_service.get_user_by_id(db, user_id) if user_id is not None else None
    if user is None:
        raise ApiError(401, "Invalid access token")
    return user

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

def body_payload(schema: Type[BaseModel]):
    """
    Dependency that reads `schema` from a JSON body or from form fields
    Url-encoded and multipart forms are accepted alongside JSON; a missing body is {}
    """
    async def read_payload(request: Request) -> BaseModel:
        content_type = request.headers.get("content-type", "")
        try:
            if content_type.startswith(FORM_CONTENT_TYPES):
                form = await request.form()
                raw = {key: value for key, value in form.items() if isinstance(value, str)}
            else:
                body = await request.body()
                raw = json.loads(body) if body.strip() else {}
        except ValueError as e:
            raise RequestValidationError([
                {"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "ctx": {"error": str(e)}}
            ])

        if not isinstance(raw, dict):
            raise RequestValidationError([
                {"type": "model_type", "loc": ("body",), "msg": "Body must be an object"}
            ])

        try:
            return schema.model_validate(raw)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False))

    return read_payload
