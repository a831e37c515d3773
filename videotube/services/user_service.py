# ============================================================================
# FILE: videotube/services/user_service.py
# ============================================================================
from typing import Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from videotube.core.errors import ApiError
from videotube.core.security import TokenService
from videotube.db.models.user import User
import logging

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with email or username already exists"

def normalize_username(username: Optional[str]) -> str:
    return (username or "").strip().lower()

def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()

class UserService:
    """Service layer for account and session operations"""

    def get_user_by_id(self, db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == normalize_username(username)).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == normalize_email(email)).first()

    def find_by_username_or_email(
        self, db: Session, username: Optional[str], email: Optional[str]
    ) -> Optional[User]:
        """First user matching either identifier; blank identifiers are ignored"""
        conditions = []
        if username and username.strip():
            conditions.append(User.username == normalize_username(username))
        if email and email.strip():
            conditions.append(User.email == normalize_email(email))
        if not conditions:
            return None
        return db.query(User).filter(or_(*conditions)).first()

    def create_user(
        self,
        db: Session,
        full_name: str,
        email: str,
        username: str,
        password: str,
        avatar: str,
        cover_image: str = "",
    ) -> User:
        """Create a new account; a unique-index violation is reported as a duplicate"""
        user = User(
            full_name=full_name.strip(),
            email=normalize_email(email),
            username=normalize_username(username),
            avatar=avatar,
            cover_image=cover_image or "",
        )
        user.set_password(password)
        try:
            db.add(user)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Duplicate registration rejected by store: {user.username}")
            raise ApiError(409, DUPLICATE_USER_MESSAGE)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating user: {e}")
            raise
        logger.info(f"User created: {user.username}")
        return user

    def generate_access_and_refresh_tokens(
        self, db: Session, user_id: int, tokens: TokenService
    ) -> Tuple[str, str]:
        """
        Mint a token pair for the user and store the refresh token on the row.
        The stored value replaces any previous one, so older refresh tokens stop working.
        """
        try:
            user = self.get_user_by_id(db, user_id)
            if user is None:
                raise LookupError(f"user {user_id} not found")

            access_token = tokens.create_access_token(user)
            refresh_token = tokens.create_refresh_token(user)

            user.refresh_token = refresh_token
            db.commit()
            return access_token, refresh_token
        except Exception as e:
            db.rollback()
            logger.error(f"Token generation failed for user {user_id}: {e}")
            raise ApiError(500, "Something went wrong while generating refresh and access tokens")

    def clear_refresh_token(self, db: Session, user: User) -> None:
        user.refresh_token = None
        db.commit()
        logger.info(f"User logged out: {user.username}")

    def change_password(self, db: Session, user: User, new_password: str) -> None:
        user.set_password(new_password)
        db.commit()
        logger.info(f"Password changed for user {user.id}")

    def update_account_details(
        self, db: Session, user: User, full_name: Optional[str], email: Optional[str]
    ) -> User:
        """Apply the given fields, keeping the current value for omitted ones"""
        if full_name and full_name.strip():
            user.full_name = full_name.strip()
        if email and email.strip():
            user.email = normalize_email(email)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ApiError(409, "Email is already in use")
        db.refresh(user)
        return user

    def update_avatar(self, db: Session, user: User, url: str) -> User:
        user.avatar = url
        db.commit()
        db.refresh(user)
        return user

    def update_cover_image(self, db: Session, user: User, url: str) -> User:
        user.cover_image = url
        db.commit()
        db.refresh(user)
        return user

# Create singleton instance
user_service = UserService()
