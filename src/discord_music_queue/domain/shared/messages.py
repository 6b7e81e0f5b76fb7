"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Command Context Errors
    INVALID_COMMAND_CONTEXT = "invalid command occurred: missing key properties"
    PERMISSION_DENIED = "Member is missing the required role '{role}'"

    # Queue Errors
    EMPTY_BATCH = "Cannot enqueue an empty batch of tracks"
    QUEUE_EMPTY = "Queue is empty"
    QUEUE_FULL = "Queue is full (max {max_size} tracks)"
    INDEX_OUT_OF_RANGE = "Index {index} is out of range for a queue of {length} tracks"

    # Voice Errors
    NO_VOICE_CHANNEL = "Caller is not in a voice channel"
    CHANNEL_OCCUPIED = "Bot is already connected to voice channel {channel_id}"
    CONNECTION_FAILED = "Could not connect to voice channel {channel_id}"
    NOT_CONNECTED = "Not connected to voice in guild {guild_id}"
    NO_RESULTS = "No results were found for '{query}'"

    # Executor Errors
    WORK_ITEM_FAILED = "Work item '{item_id}' failed"
    EMPTY_WORK_ITEM_ID = "Work item id cannot be empty"
    INVALID_INTERVAL = "Execution interval must be positive"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Authentication/Security Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Work Queue
    WORK_QUEUE_STARTED = "Work queue timer started (interval %.3fs)"
    WORK_QUEUE_DRAINED = "Work queue drained, timer stopped"
    WORK_QUEUE_CLEARED = "Work queue cleared, discarded %d pending item(s)"
    WORK_QUEUE_EXECUTING = "Executing work item %s"
    WORK_QUEUE_ITEM_FAILED = "Error occurred while executing work item %s"
    WORK_QUEUE_CLOSED = "Work queue closed, cancelled %d in-flight action(s)"

    # Session Registry
    SESSION_CREATED = "Created playback session for guild %s"
    SESSION_DELETED = "Deleted playback session for guild %s"
    SESSION_TORN_DOWN = "Tore down playback session for guild %s (reason=%s)"
    SESSION_SHUTDOWN_FAILED = "Failed to shut down session for guild %s"

    # Queue Operations
    QUEUE_ENQUEUED = "Queued '%s' at position %d in guild %s"
    QUEUE_REMOVED = "Removed '%s' from queue in guild %s"
    QUEUE_SKIPPED = "Skipped '%s' in guild %s"
    QUEUE_EXHAUSTED = "Queue exhausted in guild %s, session is idle"
    OBSERVER_FAILED = "Session observer failed for %s in guild %s"

    # Voice/Audio Operations
    VOICE_CONNECTING = "Connecting to voice channel %s in guild %s"
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_CONNECTION_FAILED = "Could not join voice channel %s in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"
    GUILD_NOT_FOUND = "Guild %s not found"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start playback: %s"
    TRACK_ENDED = "Track ended in guild %s (error=%s)"
    TRACK_END_CALLBACK_ERROR = "Track end callback failed for guild %s"
    TRACK_END_SUPERSEDED = "Ignoring end of superseded track in guild %s"
    TRACK_END_NO_CALLBACK = "No track-end callback registered for guild %s"
    TRACK_UNPLAYABLE = "Track '%s' has no playable stream in guild %s, moving on"
    VOICE_DISCONNECT_FAILED = "Failed to disconnect from voice in guild %s"

    # yt-dlp
    YTDLP_FAILED_SEARCH = "Failed to search for: %s"
    YTDLP_FAILED_EXTRACT = "Failed to extract info for: %s"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist: %s"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_NO_URL_IN_INFO = "No webpage URL in yt-dlp info for '%s'"
    YTDLP_RESOLVED = "Resolved '%s' to %d track(s) (playlist=%s)"

    # Commands
    COMMAND_RECEIVED = "Command '%s' from %s in guild %s"
    COMMAND_REJECTED = "Rejected command in guild %s: %s"
    COMMAND_FAILED = "There was an error with %s"
    COMMAND_PERMISSION_DENIED = "Member %s lacks DJ role '%s' in guild %s"
    COMMAND_REPLY_FAILED = "Failed to reply in channel %s: %s"

    # Bot Lifecycle
    BOT_STARTING = "Starting Discord Music Queue bot (environment=%s)"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_LOGIN_FAILED = "Discord rejected the bot token"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic logging config"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    COG_LOADED_MUSIC = "Music cog loaded (trigger=%r)"
    BOT_READY = "Bot ready as %s (ID: %s)"
    BOT_CONNECTED_GUILDS = "Connected to %d guild(s)"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %.1fs"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error shutting down container"
    BOT_VOICE_REMOVED = "Disconnected from voice in guild %s, ending its session"
    CONTAINER_STEP_FAILED = "Failed %s during container shutdown: %r"
    CONTAINER_SESSIONS_STOPPED = "Stopped %d playback session(s)"


class DiscordUIMessages:
    """User-facing Discord replies and notifications."""

    # Notifications
    NOW_PLAYING = "🎶 | Now playing **{title}** - {duration} \n[{url}]"
    TRACK_QUEUED = "⏱ | **{title}** queued at index #{position}"

    # Play
    LOADING_PLAYLIST = "⏱ | Loading your playlist..."
    LOADING_TRACK = "⏱ | Loading your track..."
    NEED_TO_BE_IN_VOICE = "You need to be in a voice channel to queue music!"
    CHANNEL_OCCUPIED = "I'm already occupied in another voice channel!"
    NO_RESULTS = "No results were found!"
    COULD_NOT_JOIN_VOICE = "Could not join your voice channel!"
    QUEUE_FULL = "❌ | The queue is full!"

    # Skip / Stop
    NOTHING_PLAYING = "❌ | No music is being played!"
    SKIPPED = "✅ | Skipped **{title}**!"
    SKIP_FAILED = "❌ | Something went wrong!"
    STOPPED = "🛑 | bye-bye!"

    # Queue
    QUEUE_EMPTY = "❌ | queue is empty!"
    NO_SUCH_INDEX = "❌ | no such index number exists! use `{queue_command}` to display current queue"
    REMOVED = "✅ | Removed **{title}**"
    EMBED_QUEUE_TITLE = "Music Queue"
    EMBED_NOW_PLAYING_FIELD = "Now Playing"
    QUEUE_LINE = "{index}. **{title}** - {duration} [{url}]"
    NOW_PLAYING_LINE = "🎶 | Now playing **{title}** - {duration} [{url}]"
    NOTHING_CURRENT = "Nothing is playing right now"
    EMBED_TOTAL_DURATION = "Total duration: {duration}"
    EMBED_MORE_TRACKS = "... and {count} more"

    # Failures
    PERMISSION_DENIED = "❌ | You need the **{role}** role to control the music!"
    INVALID_CONTEXT = "❌ | Music commands only work inside a server!"
    TERRIBLY_WRONG = "Something has gone terribly wrong! 😵‍💫"
