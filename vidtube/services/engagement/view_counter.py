"""Best-effort view counter for fetch-by-id."""

from sqlalchemy import update

from vidtube.db import async_session_maker
from vidtube.models.video import Video
from vidtube.utils.logging import get_logger
from vidtube.utils.metrics import metrics

logger = get_logger(__name__)


async def record_view(video_id: int) -> None:
    """Increment ``views`` by one on a fresh session.

    Runs as a background task after the response is sent. A single
    ``views = views + 1`` UPDATE; failures are logged and dropped because the
    counter is not a correctness requirement.
    """
    try:
        async with async_session_maker() as db:
            await db.execute(
                update(Video).where(Video.id == video_id).values(views=Video.views + 1)
            )
            await db.commit()
    except Exception as e:
        metrics.view_count_failures_total.inc()
        logger.warning(f"Failed to record view for video {video_id}: {e}")
