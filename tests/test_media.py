"""Tests for playlist and video registration."""

import asyncio

import pytest

from contentdesk.errors import ValidationError
from contentdesk.media import MediaService, playlist_id_from_url, video_id_from_url


def test_playlist_id_from_url():
    assert playlist_id_from_url("https://www.youtube.com/playlist?list=PLabc") == "PLabc"
    assert playlist_id_from_url("https://youtube.com/watch?v=xyz&list=PLdef") == "PLdef"
    assert playlist_id_from_url("https://www.youtube.com/watch?v=xyz") is None
    assert playlist_id_from_url("https://vimeo.com/playlist?list=PLabc") is None


def test_video_id_from_url():
    assert video_id_from_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"
    assert video_id_from_url("https://youtu.be/dQw4w9WgXcQ?t=42") == "dQw4w9WgXcQ"
    assert video_id_from_url("https://youtu.be/") is None
    assert video_id_from_url("not a url") is None


def test_add_playlist(client, service):
    service.on("POST", "/admin/create/playlist", None)
    playlist = asyncio.run(MediaService(client).add_playlist(
        "https://www.youtube.com/playlist?list=PLabc", "Crypto 101", category="Education"))
    assert playlist.playlist_id == "PLabc"
    body = service.bodies("POST", "/admin/create/playlist")[0]
    assert body["playlistId"] == "PLabc"
    assert body["title"] == "Crypto 101"
    assert body["category"] == "Education"
    assert body["createdAt"]


def test_add_video(client, service):
    service.on("POST", "/admin/create/video", None)
    video = asyncio.run(MediaService(client).add_video("https://youtu.be/abc123", "Wallets"))
    assert video.video_id == "abc123"
    body = service.bodies("POST", "/admin/create/video")[0]
    assert body["videoId"] == "abc123"
    assert body["publishedAt"]


def test_add_requires_title_and_valid_url(client, service):
    media = MediaService(client)
    with pytest.raises(ValidationError):
        asyncio.run(media.add_video("https://youtu.be/abc123", " "))
    with pytest.raises(ValidationError):
        asyncio.run(media.add_playlist("https://example.com/?list=x", "Title"))
    assert service.requests == []


def test_list_playlists(client, service):
    service.on("GET", "/videos/playlists", {"playlists": [
        {"PK": "PLAYLIST#PLabc", "title": "Crypto 101"},
        {"PK": "broken", "title": "Skipped"},
    ]})
    playlists = asyncio.run(MediaService(client).list_playlists())
    assert [p.playlist_id for p in playlists] == ["PLabc"]
