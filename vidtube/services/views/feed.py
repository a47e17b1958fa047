"""Subscription feed: the published videos of every channel the viewer follows.

The feed view loads the viewer's subscriptions and joins each one to its
channel's published videos. ``flatten_feed`` then turns the joined
subscriptions into one record per video, before flags, search, sort and
pagination run, so totals count videos rather than channels.
"""

from vidtube.services.views.records import Record


def flatten_feed(subscriptions: list[Record]) -> list[Record]:
    """One output record per video, across every subscription."""
    return [video for subscription in subscriptions for video in subscription["videos"]]
