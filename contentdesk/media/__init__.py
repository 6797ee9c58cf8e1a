"""Video content registration."""

from contentdesk.media.service import MediaService, playlist_id_from_url, video_id_from_url

__all__ = ["MediaService", "playlist_id_from_url", "video_id_from_url"]
