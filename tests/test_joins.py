"""Tests for the join planner and the in-memory join step."""

from datetime import UTC, datetime

import pytest

from vidtube.exceptions import PipelineError
from vidtube.models.engagement import LikeTargetType
from vidtube.services.views.definitions import VIEWS, owner_join
from vidtube.services.views.joins import Collapse, JoinPlan, JoinSpec, apply_join, unwrap_single

OWNER = JoinSpec(
    source="videos",
    local_key="owner_id",
    target="users",
    foreign_key="id",
    as_field="owner",
    fields=("id", "username"),
)


def _ts(day: int) -> datetime:
    return datetime(2026, 1, day, tzinfo=UTC)


class TestApplyJoin:
    """Tests for the pure join step."""

    def test_one_attaches_related_record(self):
        videos = [{"id": 1, "owner_id": 7}]
        users = [{"id": 7, "username": "alice", "email": "a@example.com"}]

        [joined] = apply_join(videos, OWNER, users)

        assert joined["owner"] == {"id": 7, "username": "alice"}

    def test_missing_related_record_uses_default(self):
        joined = apply_join([{"id": 1, "owner_id": 99}], OWNER, [])
        assert joined[0]["owner"] is None

    def test_count_default_is_zero(self):
        spec = JoinSpec(
            source="videos",
            local_key="id",
            target="comments",
            foreign_key="video_id",
            as_field="comments_count",
            collapse=Collapse.COUNT,
            fields=("id",),
        )
        comments = [{"id": 1, "video_id": 1}, {"id": 2, "video_id": 1}]

        joined = apply_join([{"id": 1}, {"id": 2}], spec, comments)

        assert [r["comments_count"] for r in joined] == [2, 0]

    def test_list_default_is_empty(self):
        spec = JoinSpec(
            source="subscriptions",
            local_key="channel_id",
            target="videos",
            foreign_key="owner_id",
            as_field="videos",
            collapse=Collapse.LIST,
            fields=("id",),
        )
        joined = apply_join([{"id": 1, "channel_id": 3}], spec, [])
        assert joined[0]["videos"] == []

    def test_where_filters_related_rows(self):
        spec = JoinSpec(
            source="videos",
            local_key="id",
            target="likes",
            foreign_key="target_id",
            as_field="likes_count",
            collapse=Collapse.COUNT,
            fields=("id",),
            where=(("target_type", LikeTargetType.VIDEO),),
        )
        likes = [
            {"id": 1, "target_type": "video", "target_id": 5},
            {"id": 2, "target_type": "comment", "target_id": 5},
            {"id": 3, "target_type": "video", "target_id": 5},
        ]

        [joined] = apply_join([{"id": 5}], spec, likes)

        assert joined["likes_count"] == 2

    def test_list_valued_key_keeps_stored_order(self):
        spec = JoinSpec(
            source="playlists",
            local_key="video_ids",
            target="videos",
            foreign_key="id",
            as_field="videos",
            collapse=Collapse.LIST,
            fields=("id", "title"),
        )
        videos = [{"id": i, "title": f"v{i}"} for i in (1, 2, 3)]

        [joined] = apply_join([{"id": 1, "video_ids": [3, 1, 2]}], spec, videos)

        assert [v["id"] for v in joined["videos"]] == [3, 1, 2]

    def test_first_picks_by_order(self):
        spec = JoinSpec(
            source="users",
            local_key="id",
            target="videos",
            foreign_key="owner_id",
            as_field="latest_video",
            collapse=Collapse.FIRST,
            fields=("id", "created_at"),
            order_by=("created_at", "desc"),
        )
        videos = [
            {"id": 1, "owner_id": 1, "created_at": _ts(1)},
            {"id": 2, "owner_id": 1, "created_at": _ts(9)},
            {"id": 3, "owner_id": 1, "created_at": _ts(4)},
        ]

        [joined] = apply_join([{"id": 1}], spec, videos)

        assert joined["latest_video"]["id"] == 2

    def test_one_with_several_matches_raises(self):
        users = [{"id": 7, "username": "a"}, {"id": 7, "username": "b"}]
        with pytest.raises(PipelineError):
            apply_join([{"id": 1, "owner_id": 7}], OWNER, users)

    def test_input_records_are_not_mutated(self):
        videos = [{"id": 1, "owner_id": 7}]
        apply_join(videos, OWNER, [{"id": 7, "username": "alice"}])
        assert "owner" not in videos[0]


class TestUnwrapSingle:
    def test_empty_returns_default(self):
        assert unwrap_single([]) is None
        assert unwrap_single([], default=0) == 0

    def test_single_element(self):
        assert unwrap_single(["x"]) == "x"

    def test_more_than_one_raises(self):
        with pytest.raises(PipelineError):
            unwrap_single([1, 2])


class TestJoinPlanValidation:
    """Inconsistent plans are rejected when they are built."""

    def test_duplicate_output_field(self):
        with pytest.raises(PipelineError, match="Duplicate"):
            JoinPlan("videos", (owner_join("videos", as_field="title"),))

    def test_two_joins_with_same_name(self):
        with pytest.raises(PipelineError, match="Duplicate"):
            JoinPlan("videos", (owner_join("videos"), owner_join("videos")))

    def test_nesting_deeper_than_one_level(self):
        inner = owner_join("videos")
        middle = JoinSpec(
            source="users",
            local_key="id",
            target="videos",
            foreign_key="owner_id",
            as_field="videos",
            collapse=Collapse.LIST,
            nested=(inner,),
        )
        with pytest.raises(PipelineError, match="more than one level"):
            JoinPlan("videos", (owner_join("videos", nested=(middle,)),))

    def test_first_without_order(self):
        spec = JoinSpec(
            source="users",
            local_key="id",
            target="videos",
            foreign_key="owner_id",
            as_field="latest_video",
            collapse=Collapse.FIRST,
        )
        with pytest.raises(PipelineError, match="without an order"):
            JoinPlan("users", (spec,))

    def test_unknown_foreign_key(self):
        spec = JoinSpec(
            source="videos",
            local_key="owner_id",
            target="users",
            foreign_key="nope",
            as_field="owner",
        )
        with pytest.raises(PipelineError, match="Unknown field"):
            JoinPlan("videos", (spec,))

    def test_unknown_projection(self):
        spec = JoinSpec(
            source="videos",
            local_key="owner_id",
            target="users",
            foreign_key="id",
            as_field="owner",
            fields=("id", "password"),
        )
        with pytest.raises(PipelineError, match="unknown fields"):
            JoinPlan("videos", (spec,))

    def test_source_mismatch(self):
        with pytest.raises(PipelineError):
            JoinPlan("tweets", (owner_join("videos"),))

    def test_every_named_view_is_valid(self):
        # Plans are validated at import; this just pins their primary collections
        assert {definition.collection for definition in VIEWS.values()} == {
            "videos",
            "comments",
            "tweets",
            "playlists",
            "subscriptions",
            "likes",
            "users",
        }
