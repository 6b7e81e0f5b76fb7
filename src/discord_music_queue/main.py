#!/usr/bin/env python3
"""Process entry point: configure logging, validate the token, run the bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import discord

from discord_music_queue.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from discord_music_queue.config.settings import Settings
    from discord_music_queue.infrastructure.discord.bot import MusicBot

LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
PACKAGE_LOGGER = "discord_music_queue"
FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def _load_logging_config(path: Path) -> dict[str, Any] | None:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None


def setup_logging(
    log_level: str = "INFO", *, debug: bool = False, config_path: Path = LOGGING_CONFIG_PATH
) -> int:
    """Apply the JSON dictConfig, or a plain format when it cannot be used.

    ``debug`` forces DEBUG on this package's loggers regardless of ``log_level``,
    leaving discord.py at whatever the config file chose. Returns the level
    applied to the root logger.
    """
    level = logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)

    config = _load_logging_config(config_path)
    try:
        if config is None:
            raise ValueError(config_path)
        logging.config.dictConfig(config)
    except ValueError:
        logging.basicConfig(level=level, format=FALLBACK_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        logger.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, config_path)

    logging.getLogger().setLevel(level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if debug else level)
    return level


def build_bot(settings: Settings) -> MusicBot:
    from discord_music_queue.config.container import create_container
    from discord_music_queue.infrastructure.discord.bot import create_bot

    return create_bot(create_container(settings), settings)


def main() -> int:
    from discord_music_queue.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level, debug=settings.debug)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    bot = build_bot(settings)

    try:
        bot.run_with_graceful_shutdown(token, shutdown_timeout=settings.shutdown_timeout_seconds)
    except discord.LoginFailure:
        logger.error(LogTemplates.BOT_LOGIN_FAILED)
        return 1
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1

    logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
