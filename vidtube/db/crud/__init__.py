"""CRUD operations module."""

from vidtube.db.crud.comments import add_comment, delete_comment, update_comment
from vidtube.db.crud.playlists import (
    add_video_to_playlist,
    create_playlist,
    delete_playlist,
    get_playlist,
    get_playlist_video_ids,
    remove_video_from_playlist,
    to_playlist_read,
    update_playlist,
)
from vidtube.db.crud.tweets import create_tweet, delete_tweet, update_tweet
from vidtube.db.crud.users import create_user, get_user
from vidtube.db.crud.videos import (
    create_video,
    delete_video,
    get_video,
    toggle_publish_status,
    update_video,
)

__all__ = [
    "add_comment",
    "add_video_to_playlist",
    "create_playlist",
    "create_tweet",
    "create_user",
    "create_video",
    "delete_comment",
    "delete_playlist",
    "delete_tweet",
    "delete_video",
    "get_playlist",
    "get_playlist_video_ids",
    "get_user",
    "get_video",
    "remove_video_from_playlist",
    "to_playlist_read",
    "toggle_publish_status",
    "update_comment",
    "update_playlist",
    "update_tweet",
    "update_video",
]
