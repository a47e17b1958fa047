"""Engagement services: like/subscription toggles and view counting."""

from vidtube.services.engagement.toggle import (
    count_subscribers,
    get_like_stats,
    is_subscribed,
    toggle,
)
from vidtube.services.engagement.view_counter import record_view

__all__ = [
    "count_subscribers",
    "get_like_stats",
    "is_subscribed",
    "record_view",
    "toggle",
]
