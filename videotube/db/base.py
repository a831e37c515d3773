# ============================================================================
# FILE: videotube/db/base.py
# ============================================================================
from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    pass

def import_models() -> None:
    """Register every model on Base.metadata before create_all"""
    from videotube.db.models import user, video, subscription, history  # noqa: F401
