"""View composition and ranking engine."""

from vidtube.services.views.definitions import VIEWS, ViewDefinition, ViewFilters, ViewKind
from vidtube.services.views.derived import FixedNoise, NoiseSource, RandomNoise, SeededNoise
from vidtube.services.views.engine import get_view, list_view
from vidtube.services.views.joins import Collapse, JoinPlan, JoinSpec, apply_join, unwrap_single
from vidtube.services.views.pagination import Page, paginate, validate_page_params
from vidtube.services.views.ranking import SortSpec, search, sort_records
from vidtube.services.views.view_models import (
    ChannelProfile,
    CommentView,
    LikeView,
    OwnerProfile,
    PlaylistView,
    SubscriptionView,
    TweetView,
    VideoView,
)

__all__ = [
    "VIEWS",
    "ChannelProfile",
    "Collapse",
    "CommentView",
    "FixedNoise",
    "JoinPlan",
    "JoinSpec",
    "LikeView",
    "NoiseSource",
    "OwnerProfile",
    "Page",
    "PlaylistView",
    "RandomNoise",
    "SeededNoise",
    "SortSpec",
    "SubscriptionView",
    "TweetView",
    "VideoView",
    "ViewDefinition",
    "ViewFilters",
    "ViewKind",
    "apply_join",
    "get_view",
    "list_view",
    "paginate",
    "search",
    "sort_records",
    "unwrap_single",
    "validate_page_params",
]
