"""Tests for the named views, run end to end against the database."""

from datetime import timedelta

import pytest

from vidtube.exceptions import InvalidInput, InvalidOperation, NotFound
from vidtube.models import Comment, Like, Subscription
from vidtube.models.engagement import ChannelRef, CommentRef, LikeTargetType, TweetRef, VideoRef
from vidtube.services.engagement import toggle
from vidtube.services.views import (
    FixedNoise,
    SortSpec,
    ViewFilters,
    ViewKind,
    get_view,
    list_view,
)


def _ids(page) -> list[int]:
    return [item.id for item in page.items]


class TestVideoViews:
    """Tests for public, personal and detail video views."""

    @pytest.mark.asyncio
    async def test_public_list_hides_drafts(self, db_session, alice, make_video):
        published = await make_video(alice)
        await make_video(alice, is_published=False)

        page = await list_view(db_session, ViewKind.VIDEOS)

        assert _ids(page) == [published.id]
        assert page.items[0].owner.username == "alice"

    @pytest.mark.asyncio
    async def test_owner_sees_drafts_when_asked(self, db_session, alice, bob, make_video):
        await make_video(alice)
        await make_video(alice, is_published=False)

        own = await list_view(
            db_session,
            ViewKind.VIDEOS,
            ViewFilters(owner_id=alice.id, published_only=False),
            viewer_id=alice.id,
        )
        other = await list_view(
            db_session,
            ViewKind.VIDEOS,
            ViewFilters(owner_id=alice.id, published_only=False),
            viewer_id=bob.id,
        )

        assert own.total_count == 2
        assert other.total_count == 1

    @pytest.mark.asyncio
    async def test_is_liked_reflects_viewer(self, db_session, alice, bob, make_video):
        liked = await make_video(bob, age=timedelta(hours=2))
        await make_video(bob, age=timedelta(hours=1))
        await toggle(db_session, alice.id, VideoRef(liked.id))

        page = await list_view(db_session, ViewKind.VIDEOS, viewer_id=alice.id)
        anonymous = await list_view(db_session, ViewKind.VIDEOS)

        flags = {item.id: item.is_liked for item in page.items}
        assert flags[liked.id] is True
        assert sum(flags.values()) == 1
        assert all(item.is_liked is False for item in anonymous.items)
        assert {item.id: item.likes_count for item in page.items}[liked.id] == 1

    @pytest.mark.asyncio
    async def test_search_and_sort(self, db_session, alice, make_video):
        await make_video(alice, "Python basics", views=5)
        await make_video(alice, "Advanced python", views=50)
        await make_video(alice, "Cooking pasta", views=500)

        page = await list_view(
            db_session,
            ViewKind.VIDEOS,
            ViewFilters(query="PYTHON"),
            SortSpec("views", "desc"),
        )

        assert [item.title for item in page.items] == ["Advanced python", "Python basics"]

    @pytest.mark.asyncio
    async def test_unsupported_sort_key(self, db_session):
        with pytest.raises(InvalidOperation):
            await list_view(db_session, ViewKind.VIDEOS, sort=SortSpec("engagement_score", "desc"))

    @pytest.mark.asyncio
    async def test_pages_concatenate_to_full_result(self, db_session, alice, make_video):
        for hours in range(7):
            await make_video(alice, age=timedelta(hours=hours))

        full = await list_view(db_session, ViewKind.VIDEOS, limit=100)
        pages = [
            await list_view(db_session, ViewKind.VIDEOS, page=p, limit=3) for p in (1, 2, 3)
        ]

        assert [i for page in pages for i in _ids(page)] == _ids(full)
        assert pages[0].total_count == 7
        assert pages[0].total_pages == 3

    @pytest.mark.asyncio
    async def test_my_videos_engagement_score(self, db_session, alice, bob, carol, make_video):
        video = await make_video(alice, views=100, is_published=False)
        for liker in (bob, carol):
            db_session.add(Like(liked_by_id=liker.id, target_type=LikeTargetType.VIDEO, target_id=video.id))
        for _ in range(2):
            db_session.add(Comment(video_id=video.id, owner_id=bob.id, content="hi"))
        await db_session.commit()

        page = await list_view(db_session, ViewKind.MY_VIDEOS, viewer_id=alice.id)

        [item] = page.items
        assert item.likes_count == 2
        assert item.comments_count == 2
        assert item.engagement_score == 100 + 2 * 5 + 2 * 10

    @pytest.mark.asyncio
    async def test_my_videos_requires_viewer(self, db_session):
        with pytest.raises(InvalidInput):
            await list_view(db_session, ViewKind.MY_VIDEOS)

    @pytest.mark.asyncio
    async def test_detail_includes_counts_and_flags(self, db_session, alice, bob, make_video, make_comment):
        video = await make_video(bob)
        await make_comment(alice, video)
        await toggle(db_session, alice.id, VideoRef(video.id))
        await toggle(db_session, alice.id, ChannelRef(bob.id))

        detail = await get_view(db_session, ViewKind.VIDEO_DETAIL, video.id, viewer_id=alice.id)

        assert detail.kind == "video"
        assert detail.likes_count == 1
        assert detail.comments_count == 1
        assert detail.is_liked is True
        assert detail.owner.subscribers_count == 1
        assert detail.owner.is_subscribed is True

    @pytest.mark.asyncio
    async def test_detail_not_found(self, db_session):
        with pytest.raises(NotFound, match="Video not found"):
            await get_view(db_session, ViewKind.VIDEO_DETAIL, 404)

    @pytest.mark.asyncio
    async def test_detail_invalid_id(self, db_session):
        with pytest.raises(InvalidInput):
            await get_view(db_session, ViewKind.VIDEO_DETAIL, "abc")


class TestRankedViews:
    @pytest.mark.asyncio
    async def test_trending_window(self, db_session, alice, make_video):
        recent = await make_video(alice, age=timedelta(days=6))
        await make_video(alice, age=timedelta(days=8), views=10_000)

        page = await list_view(db_session, ViewKind.TRENDING)

        assert _ids(page) == [recent.id]
        assert page.items[0].trending_score == 0

    @pytest.mark.asyncio
    async def test_trending_orders_by_score(self, db_session, alice, bob, make_video):
        quiet = await make_video(alice, views=10)
        liked = await make_video(alice, views=10)
        await toggle(db_session, bob.id, VideoRef(liked.id))

        page = await list_view(db_session, ViewKind.TRENDING)

        assert _ids(page) == [liked.id, quiet.id]
        assert page.items[0].trending_score == 15

    @pytest.mark.asyncio
    async def test_recommended_excludes_own_videos(self, db_session, alice, bob, make_video):
        await make_video(alice, views=1000)
        low = await make_video(bob, views=10)
        high = await make_video(bob, views=100)

        page = await list_view(
            db_session, ViewKind.RECOMMENDED, viewer_id=alice.id, noise=FixedNoise(1.0)
        )

        assert _ids(page) == [high.id, low.id]
        assert page.items[0].recommendation_score == pytest.approx(31.0)

    @pytest.mark.asyncio
    async def test_trending_window_cannot_be_widened(self, db_session, alice, make_video):
        await make_video(alice, age=timedelta(days=8))

        page = await list_view(db_session, ViewKind.TRENDING, ViewFilters(date_window_days=30))

        assert page.total_count == 0

    @pytest.mark.asyncio
    async def test_trending_window_can_be_narrowed(self, db_session, alice, make_video):
        fresh = await make_video(alice, age=timedelta(hours=12))
        await make_video(alice, age=timedelta(days=3))

        page = await list_view(db_session, ViewKind.TRENDING, ViewFilters(date_window_days=1))

        assert _ids(page) == [fresh.id]

    @pytest.mark.asyncio
    async def test_trending_rejects_empty_window(self, db_session):
        with pytest.raises(InvalidInput, match="date_window_days"):
            await list_view(db_session, ViewKind.TRENDING, ViewFilters(date_window_days=0))


class TestFeed:
    @pytest.mark.asyncio
    async def test_feed_flattens_subscriptions(self, db_session, alice, bob, carol, make_video):
        await toggle(db_session, alice.id, ChannelRef(bob.id))
        await toggle(db_session, alice.id, ChannelRef(carol.id))
        oldest = await make_video(bob, age=timedelta(days=3))
        await make_video(bob, age=timedelta(days=2), is_published=False)
        middle = await make_video(carol, age=timedelta(days=1))
        newest = await make_video(bob)
        await make_video(alice)

        page = await list_view(db_session, ViewKind.FEED, viewer_id=alice.id)

        assert _ids(page) == [newest.id, middle.id, oldest.id]
        assert page.total_count == 3
        assert page.items[0].owner.username == "bob"

    @pytest.mark.asyncio
    async def test_feed_likes_match_video_detail(self, db_session, alice, bob, carol, make_video):
        video = await make_video(bob)
        await toggle(db_session, alice.id, ChannelRef(bob.id))
        await toggle(db_session, alice.id, VideoRef(video.id))
        await toggle(db_session, carol.id, VideoRef(video.id))

        detail = await get_view(db_session, ViewKind.VIDEO_DETAIL, video.id, viewer_id=alice.id)
        feed = await list_view(db_session, ViewKind.FEED, viewer_id=alice.id)
        liked = await list_view(db_session, ViewKind.LIKED_VIDEOS, viewer_id=alice.id)

        [item] = feed.items
        assert detail.likes_count == 2
        assert item.likes_count == detail.likes_count
        assert item.is_liked is detail.is_liked is True
        assert liked.items[0].video.likes_count == detail.likes_count
        assert liked.items[0].video.is_liked is True

    @pytest.mark.asyncio
    async def test_feed_search(self, db_session, alice, bob, make_video):
        await toggle(db_session, alice.id, ChannelRef(bob.id))
        match = await make_video(bob, "Sourdough at home")
        await make_video(bob, "Bike repair")

        page = await list_view(
            db_session, ViewKind.FEED, ViewFilters(query="sourdough"), viewer_id=alice.id
        )

        assert _ids(page) == [match.id]
        assert page.total_count == 1

    @pytest.mark.asyncio
    async def test_feed_without_subscriptions(self, db_session, alice):
        page = await list_view(db_session, ViewKind.FEED, viewer_id=alice.id)
        assert page.items == []
        assert page.total_count == 0


class TestPlaylistViews:
    @pytest.mark.asyncio
    async def test_detail_keeps_order_and_skips_drafts(self, db_session, alice, bob, make_video, make_playlist):
        first = await make_video(bob, views=3, duration_seconds=10)
        draft = await make_video(bob, is_published=False)
        second = await make_video(alice, views=4, duration_seconds=20)
        playlist = await make_playlist(alice, [second, draft, first])

        detail = await get_view(db_session, ViewKind.PLAYLIST_DETAIL, playlist.id)

        assert [v.id for v in detail.videos] == [second.id, first.id]
        assert detail.videos[0].owner.username == "alice"
        assert detail.total_videos == 2
        assert detail.total_views == 7
        assert detail.total_duration == 30
        assert detail.first_video_thumbnail == second.thumbnail_url

    @pytest.mark.asyncio
    async def test_public_listing_skips_empty_playlists(self, db_session, alice, make_video, make_playlist):
        draft = await make_video(alice, is_published=False)
        video = await make_video(alice, views=9)
        await make_playlist(alice, [], name="Empty")
        await make_playlist(alice, [draft], name="Drafts only")
        visible = await make_playlist(alice, [video], name="Visible")

        public = await list_view(db_session, ViewKind.PLAYLISTS)
        own = await list_view(db_session, ViewKind.PLAYLISTS, ViewFilters(owner_id=alice.id))

        assert _ids(public) == [visible.id]
        assert own.total_count == 3

    @pytest.mark.asyncio
    async def test_public_listing_sorted_by_total_views(self, db_session, alice, make_video, make_playlist):
        popular = await make_video(alice, views=100)
        niche = await make_video(alice, views=1)
        small = await make_playlist(alice, [niche], name="Small")
        big = await make_playlist(alice, [popular], name="Big")

        page = await list_view(db_session, ViewKind.PLAYLISTS)

        assert _ids(page) == [big.id, small.id]


class TestSubscriptionViews:
    @pytest.mark.asyncio
    async def test_subscribers_flag_follow_back(self, db_session, alice, bob, carol):
        await toggle(db_session, bob.id, ChannelRef(alice.id))
        await toggle(db_session, carol.id, ChannelRef(alice.id))
        await toggle(db_session, alice.id, ChannelRef(bob.id))

        page = await list_view(
            db_session,
            ViewKind.SUBSCRIBERS,
            ViewFilters(channel_id=alice.id),
            viewer_id=alice.id,
        )

        flags = {item.subscriber.username: item.subscriber.is_subscribed for item in page.items}
        assert flags == {"bob": True, "carol": False}
        counts = {item.subscriber.username: item.subscriber.subscribers_count for item in page.items}
        assert counts == {"bob": 1, "carol": 0}

    @pytest.mark.asyncio
    async def test_subscribers_requires_channel(self, db_session):
        with pytest.raises(InvalidInput, match="Channel ID is required"):
            await list_view(db_session, ViewKind.SUBSCRIBERS)

    @pytest.mark.asyncio
    async def test_subscribed_channels_latest_video(self, db_session, alice, bob, carol, make_video):
        await toggle(db_session, alice.id, ChannelRef(bob.id))
        await toggle(db_session, alice.id, ChannelRef(carol.id))
        await make_video(bob, age=timedelta(days=2))
        latest = await make_video(bob, age=timedelta(days=1))
        await make_video(bob, is_published=False)

        page = await list_view(
            db_session, ViewKind.SUBSCRIBED_CHANNELS, ViewFilters(subscriber_id=alice.id)
        )

        channels = {item.channel.username: item.channel for item in page.items}
        assert channels["bob"].latest_video.id == latest.id
        assert channels["bob"].videos_count == 2
        assert channels["bob"].subscribers_count == 1
        assert channels["carol"].latest_video is None
        assert channels["carol"].videos_count == 0

    @pytest.mark.asyncio
    async def test_channel_profile(self, db_session, alice, bob, make_video):
        await make_video(bob)
        await make_video(bob, is_published=False)
        db_session.add(Subscription(subscriber_id=alice.id, channel_id=bob.id))
        await db_session.commit()

        profile = await get_view(db_session, ViewKind.CHANNEL, bob.id, viewer_id=alice.id)

        assert profile.kind == "channel"
        assert profile.videos_count == 1
        assert profile.subscribers_count == 1
        assert profile.is_subscribed is True

    @pytest.mark.asyncio
    async def test_missing_channel(self, db_session):
        with pytest.raises(NotFound, match="Channel not found"):
            await get_view(db_session, ViewKind.CHANNEL, 12)


class TestLikedViews:
    @pytest.mark.asyncio
    async def test_liked_videos_skip_unpublished(self, db_session, alice, bob, make_video):
        visible = await make_video(bob)
        hidden = await make_video(bob, is_published=False)
        await toggle(db_session, alice.id, VideoRef(visible.id))
        await toggle(db_session, alice.id, VideoRef(hidden.id))

        page = await list_view(db_session, ViewKind.LIKED_VIDEOS, viewer_id=alice.id)

        assert [item.video.id for item in page.items] == [visible.id]
        assert page.items[0].target_type == "video"
        assert page.items[0].video.owner.username == "bob"

    @pytest.mark.asyncio
    async def test_liked_comments_and_tweets(self, db_session, alice, bob, make_video, make_comment, make_tweet):
        video = await make_video(bob)
        comment = await make_comment(bob, video, "great")
        tweet = await make_tweet(bob, "news")
        await toggle(db_session, alice.id, CommentRef(comment.id))
        await toggle(db_session, alice.id, TweetRef(tweet.id))

        comments = await list_view(db_session, ViewKind.LIKED_COMMENTS, viewer_id=alice.id)
        tweets = await list_view(db_session, ViewKind.LIKED_TWEETS, viewer_id=alice.id)

        assert [item.comment.content for item in comments.items] == ["great"]
        assert [item.tweet.content for item in tweets.items] == ["news"]
        assert comments.items[0].video is None
        assert comments.items[0].comment.likes_count == 1
        assert tweets.items[0].tweet.likes_count == 1
        assert tweets.items[0].tweet.owner.username == "bob"


class TestCommentAndTweetViews:
    @pytest.mark.asyncio
    async def test_comments_for_video(self, db_session, alice, bob, make_video, make_comment):
        video = await make_video(bob)
        other = await make_video(bob)
        liked = await make_comment(alice, video)
        await make_comment(bob, other)
        await toggle(db_session, bob.id, CommentRef(liked.id))

        page = await list_view(
            db_session, ViewKind.COMMENTS, ViewFilters(video_id=video.id), viewer_id=bob.id
        )

        assert _ids(page) == [liked.id]
        assert page.items[0].likes_count == 1
        assert page.items[0].is_liked is True
        assert page.items[0].owner.username == "alice"

    @pytest.mark.asyncio
    async def test_comments_require_video(self, db_session):
        with pytest.raises(InvalidInput, match="Video ID is required"):
            await list_view(db_session, ViewKind.COMMENTS)

    @pytest.mark.asyncio
    async def test_tweets_by_owner(self, db_session, alice, bob, make_tweet):
        own = await make_tweet(alice, "mine")
        await make_tweet(bob, "theirs")

        page = await list_view(db_session, ViewKind.TWEETS, ViewFilters(owner_id=alice.id))

        assert _ids(page) == [own.id]
        assert page.items[0].kind == "tweet"

    @pytest.mark.asyncio
    async def test_tweet_detail(self, db_session, alice, bob, carol, make_tweet):
        tweet = await make_tweet(bob, "hello")
        await toggle(db_session, alice.id, TweetRef(tweet.id))
        await toggle(db_session, carol.id, TweetRef(tweet.id))

        seen_by_alice = await get_view(db_session, ViewKind.TWEET_DETAIL, tweet.id, viewer_id=alice.id)
        anonymous = await get_view(db_session, ViewKind.TWEET_DETAIL, tweet.id)

        assert seen_by_alice.content == "hello"
        assert seen_by_alice.owner.username == "bob"
        assert seen_by_alice.likes_count == 2
        assert seen_by_alice.is_liked is True
        assert anonymous.is_liked is False

    @pytest.mark.asyncio
    async def test_tweet_detail_not_found(self, db_session):
        with pytest.raises(NotFound, match="Tweet not found"):
            await get_view(db_session, ViewKind.TWEET_DETAIL, 999)
