# ============================================================================
# FILE: videotube/services/channel_service.py
# Channel profile counts and watch-history join
# ============================================================================
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased
from videotube.core.errors import ApiError
from videotube.db.models.history import WatchHistory
from videotube.db.models.subscription import Subscription
from videotube.db.models.user import User
from videotube.db.models.video import Video
from videotube.schemas.channel import ChannelProfile
from videotube.schemas.history import VideoOwner, WatchHistoryVideo
import logging

logger = logging.getLogger(__name__)

class ChannelService:
    """Read-side queries over users, subscriptions and videos"""

    def get_channel_profile(
        self, db: Session, username: str, viewer_id: Optional[int] = None
    ) -> Optional[ChannelProfile]:
        """
        Channel header for `username`

        subscribersCount counts subscriptions where the user is the channel,
        channelsSubscribedToCount those where the user is the subscriber.
        """
        channel = db.query(User).filter(User.username == username).first()
        if not channel:
            return None

        subscribers_count = db.query(func.count(Subscription.id)).filter(
            Subscription.channel_id == channel.id
        ).scalar()
        subscribed_to_count = db.query(func.count(Subscription.id)).filter(
            Subscription.subscriber_id == channel.id
        ).scalar()

        is_subscribed = False
        if viewer_id is not None:
            is_subscribed = db.query(Subscription.id).filter(
                Subscription.channel_id == channel.id,
                Subscription.subscriber_id == viewer_id,
            ).first() is not None

        return ChannelProfile(
            full_name=channel.full_name,
            username=channel.username,
            subscribers_count=subscribers_count or 0,
            channels_subscribed_to_count=subscribed_to_count or 0,
            is_subscribed=is_subscribed,
            email=channel.email,
            avatar=channel.avatar,
            cover_image=channel.cover_image or "",
        )

    def get_watch_history(self, db: Session, user_id: int) -> List[WatchHistoryVideo]:
        """
        Watched videos in list order, each with its owner's name, username and avatar.
        History entries pointing at missing videos are dropped; an empty history is [].
        """
        owner = aliased(User)
        # entry id keeps repeat watches of the same video as separate rows
        stmt = (
            select(WatchHistory.id, Video, owner.full_name, owner.username, owner.avatar)
            .select_from(WatchHistory)
            .join(Video, Video.id == WatchHistory.video_id)
            .outerjoin(owner, owner.id == Video.owner_id)
            .where(WatchHistory.user_id == user_id)
            .order_by(WatchHistory.id)
        )
        try:
            rows = db.execute(stmt).all()
        except SQLAlchemyError as e:
            logger.error(f"Watch history query failed for user {user_id}: {e}")
            raise ApiError(500, "Failed to fetch watch history")

        history = []
        for _entry_id, video, owner_name, owner_username, owner_avatar in rows:
            video_owner = None
            if owner_username is not None:
                video_owner = VideoOwner(
                    full_name=owner_name,
                    username=owner_username,
                    avatar=owner_avatar,
                )
            history.append(WatchHistoryVideo(
                id=video.id,
                video_file=video.video_file,
                thumbnail=video.thumbnail,
                title=video.title,
                description=video.description,
                duration=video.duration,
                views=video.views,
                is_published=video.is_published,
                created_at=video.created_at,
                owner=video_owner,
            ))
        return history

# Create singleton instance
channel_service = ChannelService()
