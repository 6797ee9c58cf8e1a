"""YouTube playlist and video registration."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import parse_qs, urlparse

from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import PlaylistsResponse, parse_payload
from contentdesk.errors import ValidationError, ValidationReason
from contentdesk.models.content import Playlist, Video

logger = logging.getLogger(__name__)

CREATE_PLAYLIST_PATH = "/admin/create/playlist"
CREATE_VIDEO_PATH = "/admin/create/video"
PLAYLISTS_PATH = "/videos/playlists"

_YOUTUBE_HOSTS = ("youtube.com", "www.youtube.com", "m.youtube.com", "music.youtube.com")


def playlist_id_from_url(url: str) -> Optional[str]:
    """``https://www.youtube.com/playlist?list=PLxyz`` -> ``PLxyz``."""
    parsed = urlparse((url or "").strip())
    if parsed.hostname not in _YOUTUBE_HOSTS:
        return None
    values = parse_qs(parsed.query).get("list")
    return values[0] if values else None


def video_id_from_url(url: str) -> Optional[str]:
    """Video id from a ``youtube.com/watch?v=`` or ``youtu.be/<id>`` URL."""
    parsed = urlparse((url or "").strip())
    if parsed.hostname == "youtu.be":
        video_id = parsed.path.strip("/").split("/")[0]
        return video_id or None
    if parsed.hostname in _YOUTUBE_HOSTS:
        values = parse_qs(parsed.query).get("v")
        return values[0] if values else None
    return None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError(ValidationReason.MISSING_FIELD, "Title is required")
    return title


class MediaService:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def add_playlist(
        self, url: str, title: str, description: str = "", category: str = ""
    ) -> Playlist:
        title = _require_title(title)
        playlist_id = playlist_id_from_url(url)
        if not playlist_id:
            raise ValidationError(
                ValidationReason.INVALID_VALUE, "Invalid YouTube playlist URL"
            )
        playlist = Playlist(
            playlist_id=playlist_id,
            title=title,
            description=description,
            category=category,
            created_at=_now(),
        )
        await self._client.post(CREATE_PLAYLIST_PATH, {
            "playlistId": playlist.playlist_id,
            "title": playlist.title,
            "description": playlist.description,
            "category": playlist.category,
            "createdAt": playlist.created_at,
        })
        logger.info("Playlist added: %s", playlist_id)
        return playlist

    async def add_video(
        self, url: str, title: str, description: str = "", category: str = ""
    ) -> Video:
        title = _require_title(title)
        video_id = video_id_from_url(url)
        if not video_id:
            raise ValidationError(ValidationReason.INVALID_VALUE, "Invalid YouTube video URL")
        video = Video(
            video_id=video_id,
            title=title,
            description=description,
            category=category,
            published_at=_now(),
        )
        await self._client.post(CREATE_VIDEO_PATH, {
            "videoId": video.video_id,
            "title": video.title,
            "description": video.description,
            "category": video.category,
            "publishedAt": video.published_at,
        })
        logger.info("Video added: %s", video_id)
        return video

    async def list_playlists(self) -> list[Playlist]:
        data = await self._client.get(PLAYLISTS_PATH, auth=False)
        body = parse_payload(PlaylistsResponse, data)
        playlists = []
        for row in body.playlists:
            try:
                playlists.append(Playlist.from_api(row))
            except ValueError as exc:
                logger.warning("Skipping playlist: %s", exc)
        return playlists
