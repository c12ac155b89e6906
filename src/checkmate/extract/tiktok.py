"""Short-video extraction using yt-dlp metadata (no download)."""

import asyncio
import logging
from typing import Any

import yt_dlp

from checkmate.data import Platform, VideoContent

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "TikTok Video"


class TikTokExtractor:
    """Extract short-video metadata and media URLs with yt-dlp.

    ``extract_info`` is blocking, so it runs in a worker thread.

    Args:
        cookie_file: Optional Netscape cookie file for gated videos.
    """

    def __init__(self, *, cookie_file: str | None = None) -> None:
        self._options: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
        }
        if cookie_file:
            self._options["cookiefile"] = cookie_file

    async def extract(self, url: str) -> VideoContent:
        info = await asyncio.to_thread(self._extract_info, url)
        if not info:
            raise ValueError(f"No metadata returned for {url}")
        return _info_to_content(url, info)

    def _extract_info(self, url: str) -> dict[str, Any]:
        with yt_dlp.YoutubeDL(self._options) as ydl:
            info = ydl.extract_info(url, download=False)
            return ydl.sanitize_info(info)


def _info_to_content(url: str, info: dict[str, Any]) -> VideoContent:
    """Map a yt-dlp info dict onto :class:`VideoContent`."""
    description = info.get("description") or ""
    formats = info.get("formats") or []
    video_url, video_hd, video_watermark = _pick_formats(formats)
    if video_url is None:
        video_url = info.get("url")

    has_video = bool(formats) or info.get("vcodec") not in (None, "none")
    return VideoContent(
        url=url,
        platform=Platform.TIKTOK,
        title=info.get("title") or description or DEFAULT_TITLE,
        description=description,
        creator=info.get("uploader") or info.get("creator") or info.get("channel") or "",
        content_type="video" if has_video else "image",
        video_url=video_url,
        video_hd=video_hd,
        video_watermark=video_watermark,
        play_count=info.get("view_count") or 0,
        like_count=info.get("like_count") or 0,
        comment_count=info.get("comment_count") or 0,
        share_count=info.get("repost_count") or 0,
    )


def _pick_formats(
    formats: list[dict[str, Any]],
) -> tuple[str | None, str | None, str | None]:
    """Choose standard, HD and watermarked URLs from yt-dlp formats.

    Returns:
        Tuple of (standard, hd, watermarked); any may be None.
    """
    clean: list[dict[str, Any]] = []
    watermark: str | None = None
    for fmt in formats:
        if not fmt.get("url") or fmt.get("vcodec") == "none":
            continue
        note = (fmt.get("format_note") or "").lower()
        if "watermark" in note or fmt.get("format_id") == "download":
            watermark = watermark or fmt["url"]
        else:
            clean.append(fmt)

    if not clean:
        return (watermark, None, watermark)

    by_height = sorted(clean, key=lambda f: f.get("height") or 0)
    standard = by_height[0]["url"]
    hd = by_height[-1]["url"] if (by_height[-1].get("height") or 0) >= 720 else None
    return (standard, hd, watermark)
