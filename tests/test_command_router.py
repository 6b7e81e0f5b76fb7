"""
Unit Tests for the CommandRouter

Tests for:
- MusicCommand parsing and action mapping
- Caller validation and the DJ role check
- play / skip / stop / remove / queue replies
- Error-to-reply mapping at the failure boundary
"""

from unittest.mock import MagicMock

import pytest

from discord_music_queue.application.commands.context import CommandContext
from discord_music_queue.application.commands.router import CommandAction, CommandRouter, MusicCommand
from discord_music_queue.application.interfaces.notifier import Notifier
from discord_music_queue.application.interfaces.permissions import PermissionChecker
from discord_music_queue.domain.music.entities import SearchResult
from discord_music_queue.domain.shared.exceptions import ConnectionFailureError
from discord_music_queue.domain.shared.messages import DiscordUIMessages

GUILD_ID = 987654321
VOICE_CHANNEL_ID = 111222333
OTHER_CHANNEL_ID = 444555666


class _RoleChecker(PermissionChecker):
    def __init__(self, roles: set[str]) -> None:
        self.roles = roles

    def has_role(self, member, role_name: str) -> bool:
        return role_name in self.roles


@pytest.fixture
def notifier():
    return MagicMock(spec=Notifier)


@pytest.fixture
def context(notifier):
    return CommandContext(
        guild_id=GUILD_ID,
        member=object(),
        member_name="tester",
        member_voice_channel_id=VOICE_CHANNEL_ID,
        notifier=notifier,
    )


@pytest.fixture
def make_router(audio_engine, registry):
    def _make(dj_role: str = "*", roles: set[str] | None = None) -> CommandRouter:
        return CommandRouter(
            audio_engine=audio_engine,
            registry=registry,
            permission_checker=_RoleChecker(roles or set()),
            dj_role=dj_role,
            queue_command="!music queue",
        )

    return _make


@pytest.fixture
def router(make_router):
    return make_router()


@pytest.fixture
def songs(make_track):
    return [make_track(f"Song{i}") for i in range(1, 4)]


@pytest.fixture
def search_returns(audio_engine):
    def _set(tracks, playlist: bool = False) -> None:
        audio_engine.search.return_value = SearchResult(tracks=tuple(tracks), playlist=playlist)

    return _set


class TestMusicCommandParsing:
    """Tests for MusicCommand.parse and the action mapping."""

    @pytest.mark.parametrize(
        ("content", "command", "argument"),
        [
            ("add never gonna give", MusicCommand.ADD, "never gonna give"),
            ("PLAY  song", MusicCommand.PLAY, "song"),
            ("skip", MusicCommand.SKIP, ""),
            ("remove 2", MusicCommand.REMOVE, "2"),
            ("", MusicCommand.QUEUE, ""),
            ("   ", MusicCommand.QUEUE, ""),
            ("banana split", MusicCommand.QUEUE, "split"),
        ],
    )
    def test_parse(self, content, command, argument):
        assert MusicCommand.parse(content) == (command, argument)

    @pytest.mark.parametrize("name", ["stop", "disconnect", "dc", "clear"])
    def test_stop_synonyms(self, name):
        command, _ = MusicCommand.parse(name)
        assert command.action is CommandAction.STOP

    def test_every_command_has_an_action(self):
        assert {c.action for c in MusicCommand} == set(CommandAction)


class TestCallerValidation:
    @pytest.mark.asyncio
    async def test_missing_guild_is_rejected(self, router):
        reply = await router.handle("skip", CommandContext(guild_id=None, member=object()))
        assert reply.text == DiscordUIMessages.INVALID_CONTEXT

    @pytest.mark.asyncio
    async def test_missing_member_is_rejected(self, router):
        reply = await router.handle("skip", CommandContext(guild_id=GUILD_ID, member=None))
        assert reply.text == DiscordUIMessages.INVALID_CONTEXT

    @pytest.mark.asyncio
    async def test_member_without_dj_role_is_denied(self, make_router, context, audio_engine, search_returns, songs):
        search_returns(songs[:1])
        router = make_router(dj_role="DJ", roles={"Listener"})

        reply = await router.handle("play song", context)

        assert reply.text == DiscordUIMessages.PERMISSION_DENIED.format(role="DJ")
        audio_engine.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_member_with_dj_role_is_allowed(self, make_router, context, search_returns, songs):
        search_returns(songs[:1])
        router = make_router(dj_role="DJ", roles={"DJ"})

        reply = await router.handle("play song", context)

        assert reply.text == DiscordUIMessages.LOADING_TRACK


class TestPlay:
    @pytest.mark.asyncio
    async def test_plays_first_search_result(self, router, context, registry, audio_engine, search_returns, songs):
        search_returns(songs)

        reply = await router.handle("play some song", context)

        assert reply.text == DiscordUIMessages.LOADING_TRACK
        audio_engine.search.assert_awaited_once_with("some song", requested_by="tester")
        assert registry.get(GUILD_ID).get_state().tracks == (songs[0],)

    @pytest.mark.asyncio
    async def test_playlist_enqueues_every_track(self, router, context, registry, search_returns, songs):
        search_returns(songs, playlist=True)

        reply = await router.handle("add https://youtube.com/playlist?list=PL1", context)

        assert reply.text == DiscordUIMessages.LOADING_PLAYLIST
        assert registry.get(GUILD_ID).get_state().tracks == tuple(songs)

    @pytest.mark.asyncio
    async def test_announces_through_notifier(self, router, context, notifier, search_returns, songs):
        search_returns(songs[:1])

        await router.handle("play song", context)

        sent = [call.args[0] for call in notifier.send.call_args_list]
        assert any(message.startswith("⏱ | **Song1** queued") for message in sent)
        assert any(message.startswith("🎶 | Now playing **Song1**") for message in sent)

    @pytest.mark.asyncio
    async def test_requires_voice_channel(self, router, notifier, audio_engine):
        context = CommandContext(guild_id=GUILD_ID, member=object(), notifier=notifier)

        reply = await router.handle("play song", context)

        assert reply.text == DiscordUIMessages.NEED_TO_BE_IN_VOICE
        audio_engine.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_when_bot_in_other_channel(self, router, context, audio_engine):
        audio_engine.current_channel_id.return_value = OTHER_CHANNEL_ID

        reply = await router.handle("play song", context)

        assert reply.text == DiscordUIMessages.CHANNEL_OCCUPIED

    @pytest.mark.asyncio
    async def test_same_channel_is_not_occupied(self, router, context, audio_engine, search_returns, songs):
        audio_engine.current_channel_id.return_value = VOICE_CHANNEL_ID
        search_returns(songs[:1])

        reply = await router.handle("play song", context)

        assert reply.text == DiscordUIMessages.LOADING_TRACK

    @pytest.mark.asyncio
    async def test_no_results(self, router, context, registry, search_returns):
        search_returns([])

        reply = await router.handle("play nothing", context)

        assert reply.text == DiscordUIMessages.NO_RESULTS
        assert GUILD_ID not in registry

    @pytest.mark.asyncio
    async def test_connection_failure_replies_and_drops_session(
        self, router, context, registry, audio_engine, search_returns, songs
    ):
        search_returns(songs[:1])
        audio_engine.connect.side_effect = ConnectionFailureError(VOICE_CHANNEL_ID)

        reply = await router.handle("play song", context)

        assert reply.text == DiscordUIMessages.COULD_NOT_JOIN_VOICE
        assert GUILD_ID not in registry


class TestSkipAndStop:
    @pytest.mark.asyncio
    async def test_skip_with_nothing_playing(self, router, context):
        reply = await router.handle("skip", context)
        assert reply.text == DiscordUIMessages.NOTHING_PLAYING

    @pytest.mark.asyncio
    async def test_skip_names_skipped_track(self, router, context, search_returns, songs):
        search_returns(songs, playlist=True)
        await router.handle("play list", context)

        reply = await router.handle("skip", context)

        assert reply.text == DiscordUIMessages.SKIPPED.format(title="Song1")

    @pytest.mark.asyncio
    async def test_stop_with_nothing_playing(self, router, context):
        reply = await router.handle("stop", context)
        assert reply.text == DiscordUIMessages.NOTHING_PLAYING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["stop", "disconnect", "dc", "clear"])
    async def test_stop_synonyms_tear_down(self, name, router, context, registry, audio_engine, search_returns, songs):
        search_returns(songs[:1])
        await router.handle("play song", context)

        reply = await router.handle(name, context)

        assert reply.text == DiscordUIMessages.STOPPED
        assert GUILD_ID not in registry
        audio_engine.disconnect.assert_awaited_once_with(GUILD_ID)


class TestRemoveAndQueue:
    @pytest.mark.asyncio
    async def test_remove_on_empty_queue(self, router, context):
        reply = await router.handle("remove 1", context)
        assert reply.text == DiscordUIMessages.QUEUE_EMPTY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("argument", ["", "abc", "0", "9"])
    async def test_remove_bad_index(self, argument, router, context, search_returns, songs):
        search_returns(songs, playlist=True)
        await router.handle("play list", context)

        reply = await router.handle(f"remove {argument}", context)

        assert reply.text == DiscordUIMessages.NO_SUCH_INDEX.format(queue_command="!music queue")

    @pytest.mark.asyncio
    async def test_remove_is_one_based(self, router, context, registry, search_returns, songs):
        search_returns(songs, playlist=True)
        await router.handle("play list", context)

        reply = await router.handle("remove 2", context)

        assert reply.text == DiscordUIMessages.REMOVED.format(title="Song2")
        assert registry.get(GUILD_ID).get_state().tracks == (songs[0], songs[2])

    @pytest.mark.asyncio
    async def test_queue_when_empty(self, router, context):
        reply = await router.handle("queue", context)
        assert reply.text == DiscordUIMessages.QUEUE_EMPTY

    @pytest.mark.asyncio
    async def test_unknown_command_shows_queue(self, router, context, search_returns, songs):
        search_returns(songs, playlist=True)
        await router.handle("play list", context)

        reply = await router.handle("whatever", context)

        assert reply.text is None
        assert reply.queue is not None
        assert len(reply.queue.lines) == 3
        assert reply.queue.lines[0].startswith("1. **Song1**")
        assert reply.queue.now_playing.startswith("🎶 | Now playing **Song1**")


class TestFailureBoundary:
    @pytest.mark.asyncio
    async def test_unexpected_error_is_answered(self, router, context, audio_engine, caplog):
        audio_engine.search.side_effect = RuntimeError("kaboom")

        reply = await router.handle("play song", context)

        assert reply.text == DiscordUIMessages.TERRIBLY_WRONG
        assert "kaboom" in caplog.text
