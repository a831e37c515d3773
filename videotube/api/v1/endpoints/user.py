# ============================================================================
# FILE: videotube/api/v1/endpoints/user.py
# ============================================================================
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional
import jwt
from videotube.api.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_media_uploader,
    body_payload,
    get_app_settings,
    get_token_service,
    require_current_user,
)
from videotube.config import Settings
from videotube.core.errors import ApiError
from videotube.core.media import MediaUploader, save_upload_file
from videotube.core.responses import api_response
from videotube.core.security import TokenService, subject_id
from videotube.db.models.user import User
from videotube.db.session import get_db
from videotube.schemas.user import (
    AccountDetailsUpdate,
    LoginResponse,
    PasswordChange,
    RefreshTokenRequest,
    TokenPair,
    UserLogin,
    UserRegister,
    UserResponse,
)
from videotube.services.channel_service import channel_service
from videotube.services.user_service import (
    DUPLICATE_USER_MESSAGE,
    normalize_username,
    user_service,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _set_auth_cookies(response: JSONResponse, settings: Settings, access_token: str, refresh_token: str) -> None:
    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)


def _clear_auth_cookies(response: JSONResponse, settings: Settings) -> None:
    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_user(
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    uploader: MediaUploader = Depends(get_media_uploader),
):
    """
    Register a new user account
    Multipart form with an avatar (required) and cover image (optional)
    """
    if any(_blank(field) for field in (full_name, email, username, password)):
        raise ApiError(400, "All fields are required")

    try:
        form = UserRegister(full_name=full_name, email=email, username=username, password=password)
    except ValidationError as e:
        raise ApiError(400, "Invalid request data", errors=e.errors(include_url=False))
    email = form.email

    if user_service.find_by_username_or_email(db, username, email):
        raise ApiError(409, DUPLICATE_USER_MESSAGE)

    avatar_path = await save_upload_file(avatar, settings.UPLOAD_TEMP_DIR)
    if not avatar_path:
        raise ApiError(400, "Avatar file is required")

    uploaded_avatar = await uploader.upload(avatar_path)
    if not uploaded_avatar:
        raise ApiError(400, "Avatar file is required")

    uploaded_cover = await uploader.upload(await save_upload_file(cover_image, settings.UPLOAD_TEMP_DIR))

    user = user_service.create_user(
        db,
        full_name=full_name,
        email=email,
        username=username,
        password=password,
        avatar=uploaded_avatar.url,
        cover_image=uploaded_cover.url if uploaded_cover else "",
    )

    created_user = user_service.get_user_by_id(db, user.id)
    if not created_user:
        raise ApiError(500, "Something went wrong while registering the user")

    return api_response(
        UserResponse.model_validate(created_user),
        "User registered successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login_user(
    credentials: UserLogin = Depends(body_payload(UserLogin)),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Login with username or email and password
    Returns both tokens in the body and as http-only cookies
    """
    if _blank(credentials.username) and _blank(credentials.email):
        raise ApiError(400, "Username or email is required")
    if not credentials.password:
        raise ApiError(400, "Password is required")

    user = user_service.find_by_username_or_email(db, credentials.username, credentials.email)
    if not user:
        raise ApiError(404, "User does not exist")

    if not user.check_password(credentials.password):
        raise ApiError(401, "Invalid user credentials")

    access_token, refresh_token = user_service.generate_access_and_refresh_tokens(db, user.id, tokens)
    logger.info(f"User logged in: {user.username}")

    response = api_response(
        LoginResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        "User logged in successfully",
    )
    _set_auth_cookies(response, settings, access_token, refresh_token)
    return response


@router.post("/logout")
async def logout_user(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(require_current_user),
):
    """
    Invalidate the stored refresh token and clear both cookies
    Requires authentication
    """
    user_service.clear_refresh_token(db, current_user)
    response = api_response({}, "User logged out successfully")
    _clear_auth_cookies(response, settings)
    return response


@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    payload: RefreshTokenRequest = Depends(body_payload(RefreshTokenRequest)),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Rotate the token pair
    Refresh token comes from the cookie or the body field `refreshToken`
    """
    incoming_token = request.cookies.get(REFRESH_COOKIE) or payload.refresh_token
    if not incoming_token:
        raise ApiError(401, "Unauthorized request")

    try:
        decoded = tokens.decode_refresh_token(incoming_token)
    except jwt.PyJWTError as e:
        raise ApiError(401, str(e) or "Invalid refresh token")

    user_id = subject_id(decoded)
    user = user_service.get_user_by_id(db, user_id) if user_id is not None else None
    if not user:
        raise ApiError(401, "Invalid refresh token")

    # Only the most recently issued refresh token is accepted
    if incoming_token != user.refresh_token:
        raise ApiError(401, "Refresh token is expired or used")

    access_token, refresh_token = user_service.generate_access_and_refresh_tokens(db, user.id, tokens)
    logger.info(f"Tokens rotated for user {user.id}")

    response = api_response(
        TokenPair(access_token=access_token, refresh_token=refresh_token),
        "Access token refreshed",
    )
    _set_auth_cookies(response, settings, access_token, refresh_token)
    return response


@router.post("/change-password")
async def change_current_password(
    passwords: PasswordChange = Depends(body_payload(PasswordChange)),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
):
    """
    Change password after verifying the old one
    Requires authentication
    """
    if _blank(passwords.old_password) or _blank(passwords.new_password):
        raise ApiError(400, "Old and new password are required")

    if not current_user.check_password(passwords.old_password):
        raise ApiError(400, "Invalid old password")

    user_service.change_password(db, current_user, passwords.new_password)
    return api_response({}, "Password changed successfully")


@router.get("/current-user")
async def get_current_user(
    current_user: User = Depends(require_current_user)
):
    """
    Get current user information
    Requires authentication
    """
    return api_response(UserResponse.model_validate(current_user), "User fetched successfully")


@router.patch("/update-details")
async def update_account_details(
    details: AccountDetailsUpdate = Depends(body_payload(AccountDetailsUpdate)),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
):
    """
    Update full name and/or email
    Requires authentication
    """
    if _blank(details.full_name) and _blank(details.email):
        raise ApiError(400, "Full name or email is required")

    user = user_service.update_account_details(db, current_user, details.full_name, details.email)
    return api_response(UserResponse.model_validate(user), "Account details updated successfully")


@router.patch("/update-avatar")
async def update_user_avatar(
    avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    uploader: MediaUploader = Depends(get_media_uploader),
    current_user: User = Depends(require_current_user),
):
    """
    Replace the avatar image
    Requires authentication
    """
    avatar_path = await save_upload_file(avatar, settings.UPLOAD_TEMP_DIR)
    if not avatar_path:
        raise ApiError(400, "Avatar file is missing")

    uploaded = await uploader.upload(avatar_path)
    if not uploaded or not uploaded.url:
        raise ApiError(400, "Error while uploading avatar")

    user = user_service.update_avatar(db, current_user, uploaded.url)
    return api_response(UserResponse.model_validate(user), "Avatar updated successfully")


@router.patch("/update-cover")
async def update_user_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    uploader: MediaUploader = Depends(get_media_uploader),
    current_user: User = Depends(require_current_user),
):
    """
    Replace the cover image
    Requires authentication
    """
    cover_path = await save_upload_file(cover_image, settings.UPLOAD_TEMP_DIR)
    if not cover_path:
        raise ApiError(400, "Cover image file is missing")

    uploaded = await uploader.upload(cover_path)
    if not uploaded or not uploaded.url:
        raise ApiError(400, "Error while uploading cover image")

    user = user_service.update_cover_image(db, current_user, uploaded.url)
    return api_response(UserResponse.model_validate(user), "Cover image updated successfully")


@router.get("/user-profile/{username}")
async def get_user_channel_profile(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
):
    """
    Channel profile with subscriber counts
    Requires authentication; isSubscribed is relative to the caller
    """
    username = normalize_username(username)
    if not username:
        raise ApiError(400, "Username is missing")

    channel = channel_service.get_channel_profile(db, username, viewer_id=current_user.id)
    if not channel:
        raise ApiError(404, "Channel does not exist")

    return api_response(channel, "User channel fetched successfully")


@router.get("/watch-history")
async def get_watch_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
):
    """
    Watched videos in the order they were watched
    Requires authentication
    """
    history = channel_service.get_watch_history(db, current_user.id)
    return api_response(history, "Watch history fetched successfully")
