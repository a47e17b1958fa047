"""Tests for channel dashboard aggregates."""

from datetime import UTC, datetime, timedelta

import pytest

from vidtube.exceptions import InvalidInput, InvalidOperation, NotFound
from vidtube.models.engagement import ChannelRef, TweetRef, VideoRef
from vidtube.services.dashboard import (
    channel_analytics,
    channel_stats,
    recent_activity,
    top_videos,
    tweet_stats,
    video_stats,
)
from vidtube.services.engagement import toggle


class TestChannelStats:
    @pytest.mark.asyncio
    async def test_empty_channel(self, db_session, alice):
        stats = await channel_stats(db_session, alice.id)
        assert stats.model_dump() == {
            "total_videos": 0,
            "total_views": 0,
            "total_likes": 0,
            "total_subscribers": 0,
        }

    @pytest.mark.asyncio
    async def test_totals(self, db_session, alice, bob, carol, make_video):
        first = await make_video(alice, views=10)
        await make_video(alice, views=5, is_published=False)
        await make_video(bob, views=1000)
        await toggle(db_session, bob.id, VideoRef(first.id))
        await toggle(db_session, carol.id, VideoRef(first.id))
        await toggle(db_session, bob.id, ChannelRef(alice.id))

        stats = await channel_stats(db_session, alice.id)

        assert stats.total_videos == 2
        assert stats.total_views == 15
        assert stats.total_likes == 2
        assert stats.total_subscribers == 1


class TestChannelAnalytics:
    @pytest.mark.asyncio
    async def test_daily_buckets(self, db_session, alice, bob, make_video, make_comment):
        now = datetime(2026, 5, 10, 12, tzinfo=UTC)
        day1 = await make_video(alice, views=4, created_at=now - timedelta(days=2))
        await make_video(alice, views=6, created_at=now - timedelta(days=2, hours=1))
        await make_video(alice, views=1, created_at=now - timedelta(days=1))
        await make_video(alice, views=99, created_at=now - timedelta(days=40))
        await toggle(db_session, bob.id, VideoRef(day1.id))
        await make_comment(bob, day1)

        analytics = await channel_analytics(db_session, alice.id, days=30, now=now)

        assert analytics.days == 30
        assert [d.date for d in analytics.daily] == ["2026-05-08", "2026-05-09"]
        first = analytics.daily[0]
        assert first.videos_published == 2
        assert first.total_views == 10
        assert first.total_likes == 1
        assert first.total_comments == 1

    @pytest.mark.asyncio
    async def test_invalid_days(self, db_session, alice):
        with pytest.raises(InvalidInput):
            await channel_analytics(db_session, alice.id, days=0)


class TestTopVideos:
    @pytest.mark.asyncio
    async def test_by_views_and_engagement(self, db_session, alice, bob, carol, make_video):
        viewed = await make_video(alice, views=25)
        liked = await make_video(alice, views=20)
        await make_video(alice, views=500, is_published=False)
        for fan in (bob, carol):
            await toggle(db_session, fan.id, VideoRef(liked.id))

        by_views = await top_videos(db_session, alice.id, sort_by="views")
        by_engagement = await top_videos(db_session, alice.id, sort_by="engagement")

        assert [v.id for v in by_views] == [viewed.id, liked.id]
        assert [v.id for v in by_engagement] == [liked.id, viewed.id]
        assert by_engagement[0].engagement_score == 30

    @pytest.mark.asyncio
    async def test_limit(self, db_session, alice, make_video):
        for views in range(4):
            await make_video(alice, views=views)
        assert len(await top_videos(db_session, alice.id, limit=2)) == 2

    @pytest.mark.asyncio
    async def test_invalid_sort(self, db_session, alice):
        with pytest.raises(InvalidOperation, match="Invalid sort_by"):
            await top_videos(db_session, alice.id, sort_by="title")


class TestRecentActivity:
    @pytest.mark.asyncio
    async def test_comments_and_subscriptions_newest_first(
        self, db_session, alice, bob, carol, make_video, make_comment
    ):
        video = await make_video(alice, "Launch")
        await make_comment(bob, video, "first!")
        await toggle(db_session, carol.id, ChannelRef(alice.id))

        items = await recent_activity(db_session, alice.id)

        assert [item.type for item in items] == ["subscription", "comment"]
        assert items[0].actor.username == "carol"
        assert items[1].video_title == "Launch"
        assert items[1].content == "first!"

    @pytest.mark.asyncio
    async def test_limit(self, db_session, alice, bob, make_video, make_comment):
        video = await make_video(alice)
        for _ in range(3):
            await make_comment(bob, video)
        assert len(await recent_activity(db_session, alice.id, limit=2)) == 2


class TestRecordStats:
    @pytest.mark.asyncio
    async def test_video_stats(self, db_session, alice, bob, make_video, make_comment):
        video = await make_video(alice, views=7)
        await make_comment(bob, video)
        await toggle(db_session, bob.id, VideoRef(video.id))

        stats = await video_stats(db_session, video.id)

        assert stats.views == 7
        assert stats.likes_count == 1
        assert stats.comments_count == 1
        assert stats.engagement_score == 22

    @pytest.mark.asyncio
    async def test_tweet_stats(self, db_session, alice, bob, make_tweet):
        tweet = await make_tweet(alice)
        await toggle(db_session, bob.id, TweetRef(tweet.id))

        stats = await tweet_stats(db_session, tweet.id)

        assert stats.likes_count == 1

    @pytest.mark.asyncio
    async def test_missing_records(self, db_session):
        with pytest.raises(NotFound):
            await video_stats(db_session, 404)
        with pytest.raises(NotFound):
            await tweet_stats(db_session, 404)
