"""Track resolution using yt-dlp for URLs, playlists and free-text search."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Final, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator
from yt_dlp import YoutubeDL

from discord_music_queue.config.settings import AudioSettings
from discord_music_queue.domain.music.entities import SearchResult, Track
from discord_music_queue.domain.shared.messages import LogTemplates
from discord_music_queue.domain.shared.types import NonEmptyStr, NonNegativeInt, PositiveInt

logger = logging.getLogger(__name__)

DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
DEFAULT_SEARCH_LIMIT: Final[int] = 5
MAX_TITLE_LENGTH: Final[int] = 500


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single audio format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result.

    Extra fields from yt-dlp are silently ignored. Before-validators coerce
    garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    webpage_url: NonEmptyStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = "Unknown Title"
    duration: NonNegativeInt | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("webpage_url", "url", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        """Fall back to default when yt-dlp sends empty or non-string title."""
        if not isinstance(v, str) or not v.strip():
            return "Unknown Title"
        return v[:MAX_TITLE_LENGTH]

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Coerce to non-negative int; return None for garbage values."""
        if v is None:
            return None
        try:
            val = int(v)
            return val if val >= 0 else None
        except (TypeError, ValueError):
            return None

    @property
    def page_url(self) -> str | None:
        url = self.webpage_url or self.url
        return url if url and url.startswith(("http://", "https://")) else None

    @property
    def stream_url(self) -> str | None:
        """Direct media URL: the top-level ``url`` or the last audio format."""
        if self.url:
            return self.url
        audio_formats = [f for f in self.formats if f.acodec != "none" and f.url]
        return audio_formats[-1].url if audio_formats else None


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    default_search: NonEmptyStr = "ytsearch"
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False


# ── Patterns ───────────────────────────────────────────────────────────

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"https?://"),
    re.compile(r"www\."),
]

PLAYLIST_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"[?&]list="),
    re.compile(r"/playlist\?"),
    re.compile(r"/sets/"),
    re.compile(r"/album/"),
]


class YtDlpResolver:
    """Turns a user query into tracks; blocking yt-dlp calls run in a worker thread."""

    def __init__(
        self,
        settings: AudioSettings | None = None,
        *,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self._settings = settings or AudioSettings()
        self._search_limit = search_limit
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format or "bestaudio/best")

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_playlist_opts(self) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist")

    # === Conversion ===

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    @staticmethod
    def _info_to_track(
        info: YtDlpTrackInfo,
        requested_by: str | None,
        *,
        with_stream: bool = True,
    ) -> Track | None:
        url = info.page_url
        if not url:
            logger.warning(LogTemplates.YTDLP_NO_URL_IN_INFO, info.title)
            return None

        stream_url = info.stream_url if with_stream else None
        if stream_url and not stream_url.startswith(("http://", "https://")):
            stream_url = None

        return Track(
            title=info.title,
            url=url,
            duration_seconds=info.duration,
            requested_by=requested_by or None,
            stream_url=stream_url,
        )

    # === Blocking yt-dlp calls ===

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        try:
            with YoutubeDL(params=cast(Any, self._get_opts().model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
                return self._parse_info(dict(data)) if isinstance(data, dict) else None
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT, url)
            return None

    def _extract_entries_sync(self, target: str, opts: YtDlpOpts) -> list[YtDlpTrackInfo]:
        with YoutubeDL(params=cast(Any, opts.model_dump())) as ydl:
            data = ydl.extract_info(target, download=False)

        if not isinstance(data, dict):
            return []

        entries = data.get("entries", [])
        if not isinstance(entries, list):
            return []

        return [self._parse_info(dict(e)) for e in entries if e]

    def _search_sync(self, query: str, limit: int) -> list[YtDlpTrackInfo]:
        try:
            return self._extract_entries_sync(f"ytsearch{limit}:{query}", self._get_opts())
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_SEARCH, query)
            return []

    def _extract_playlist_sync(self, url: str) -> list[YtDlpTrackInfo]:
        try:
            return self._extract_entries_sync(url, self._get_playlist_opts())
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return []

    # === Public API ===

    async def resolve(self, query: str, *, requested_by: str | None = None) -> SearchResult:
        """Resolve a URL, playlist URL or search text. Returns an empty result on failure."""
        query = query.strip()
        if not query:
            return SearchResult()

        if self.is_url(query) and self.is_playlist(query):
            # Flat playlist entries carry page URLs only; streams are resolved at play time.
            entries = await asyncio.to_thread(self._extract_playlist_sync, query)
            tracks = [self._info_to_track(e, requested_by, with_stream=False) for e in entries]
            playlist = True
        elif self.is_url(query):
            info = await asyncio.to_thread(self._extract_info_sync, query)
            tracks = [self._info_to_track(info, requested_by)] if info else []
            playlist = False
        else:
            results = await asyncio.to_thread(self._search_sync, query, self._search_limit)
            tracks = [self._info_to_track(info, requested_by) for info in results]
            playlist = False

        result = SearchResult(tracks=tuple(t for t in tracks if t is not None), playlist=playlist)
        logger.debug(LogTemplates.YTDLP_RESOLVED, query, len(result.tracks), playlist)
        return result

    async def stream_url_for(self, track: Track) -> str | None:
        """Look up a direct media URL for a track resolved without one."""
        if track.stream_url:
            return track.stream_url

        info = await asyncio.to_thread(self._extract_info_sync, track.url)
        stream_url = info.stream_url if info else None
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, track.title)
            return None
        return stream_url

    def is_url(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in URL_PATTERNS)

    def is_playlist(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in PLAYLIST_PATTERNS)
