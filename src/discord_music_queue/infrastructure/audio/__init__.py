"""Audio infrastructure - yt-dlp resolver and the Discord-backed audio engine."""

from discord_music_queue.infrastructure.audio.ytdlp_engine import YtDlpDiscordAudioEngine
from discord_music_queue.infrastructure.audio.ytdlp_resolver import (
    AudioFormatInfo,
    YtDlpOpts,
    YtDlpResolver,
    YtDlpTrackInfo,
)

__all__ = [
    "AudioFormatInfo",
    "YtDlpDiscordAudioEngine",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
