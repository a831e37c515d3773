# ============================================================================
# FILE: videotube/schemas/history.py
# ============================================================================
from typing import Optional
from datetime import datetime
from videotube.schemas.base import CamelModel

class VideoOwner(CamelModel):
    """Owner projection inside a watch-history entry"""
    full_name: str
    username: str
    avatar: str

class WatchHistoryVideo(CamelModel):
    id: int
    video_file: str
    thumbnail: str
    title: str
    description: Optional[str] = None
    duration: Optional[int] = None
    views: Optional[int] = None
    is_published: Optional[bool] = None
    created_at: Optional[datetime] = None
    owner: Optional[VideoOwner] = None
