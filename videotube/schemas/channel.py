# ============================================================================
# FILE: videotube/schemas/channel.py
# ============================================================================
from videotube.schemas.base import CamelModel

class ChannelProfile(CamelModel):
    """Projected channel page header"""
    full_name: str
    username: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    email: str
    avatar: str
    cover_image: str = ""
