# ============================================================================
# FILE: videotube/db/models/video.py
# ============================================================================
from sqlalchemy import Boolean, Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from videotube.db.base import Base

class Video(Base):
    """Uploaded video; only read here for the watch-history join"""
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    video_file = Column(String, nullable=False)  # media host URL
    thumbnail = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, default=0)  # seconds
    views = Column(Integer, default=0)
    is_published = Column(Boolean, default=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="videos")
