"""Tests for the command registry and its menu wiring."""

from __future__ import annotations

import asyncio

import pytest

from matchlines.commands.dispatcher import InvocationOutcome, Mode, ModeDispatcher
from matchlines.commands.registry import COMMANDS, CommandBinding, get_command, register_commands, run_command
from matchlines.ui.actions import MATCHING_LINES_MENU, command_actions, default_menus


def test_exposes_five_commands():
    ids = [spec.command_id for spec in COMMANDS]

    assert ids == [
        "matchlines.deleteLines",
        "matchlines.cutLines",
        "matchlines.copyLines",
        "matchlines.cutLinesToNewDocument",
        "matchlines.copyLinesToNewDocument",
    ]
    assert len(set(ids)) == 5


def test_command_modes_and_targets():
    assert get_command("matchlines.deleteLines").mode is Mode.DELETE
    assert not get_command("matchlines.deleteLines").send_to_new_document
    assert get_command("matchlines.cutLinesToNewDocument").send_to_new_document
    assert get_command("matchlines.copyLinesToNewDocument").mode is Mode.COPY


def test_get_command_unknown_raises():
    with pytest.raises(KeyError):
        get_command("matchlines.nope")


@pytest.mark.asyncio
async def test_run_command_passes_title_to_prompt(host):
    host.queue_answer("foo")
    dispatcher = ModeDispatcher(host)

    outcome = await run_command(dispatcher, "matchlines.copyLinesToNewDocument")

    assert outcome is InvocationOutcome.REPORTED
    assert host.prompts[0].title == "Copy Matching Lines To New Document"
    assert host.documents[-1].text == "foo\nfoobar\n"


@pytest.mark.asyncio
async def test_binding_trigger_schedules_on_running_loop(host, sample_document):
    host.queue_answer("baz")
    bindings = register_commands(ModeDispatcher(host))

    task = bindings["matchlines.deleteLines"].trigger()
    assert task in bindings["matchlines.deleteLines"].pending
    outcome = await task
    await asyncio.sleep(0)

    assert outcome is InvocationOutcome.REPORTED
    assert sample_document.text == "foo\nbar\nfoobar\n"
    assert not bindings["matchlines.deleteLines"].pending


class _ExplodingDispatcher:
    async def execute(self, *args, **kwargs):
        raise RuntimeError("dispatcher exploded")


@pytest.mark.asyncio
async def test_binding_logs_and_forgets_failed_invocations(caplog):
    binding = CommandBinding(spec=get_command("matchlines.copyLines"), dispatcher=_ExplodingDispatcher())

    task = binding.trigger()
    with pytest.raises(RuntimeError):
        await task
    await asyncio.sleep(0)

    assert not binding.pending
    assert "matchlines.copyLines raised" in caplog.text


def test_binding_trigger_accepts_custom_spawn(host):
    host.queue_answer(None)
    bindings = register_commands(ModeDispatcher(host))

    outcome = bindings["matchlines.cutLines"].trigger(spawn=asyncio.run)

    assert outcome is InvocationOutcome.CANCELLED


def test_command_actions_follow_registry_order(host):
    bindings = register_commands(ModeDispatcher(host))

    actions = command_actions(bindings)
    menus = default_menus(("file.open",))

    assert list(actions) == [spec.command_id for spec in COMMANDS]
    assert actions["matchlines.deleteLines"].shortcut == "Ctrl+Alt+D"
    assert menus[MATCHING_LINES_MENU].actions == tuple(actions)
    assert menus["file"].actions == ("file.open",)


def test_window_action_trigger_invokes_binding(host):
    calls: list[str] = []
    bindings = register_commands(ModeDispatcher(host))
    actions = command_actions(bindings)
    actions["matchlines.copyLines"].callback = lambda: calls.append("copy")

    actions["matchlines.copyLines"].trigger()

    assert calls == ["copy"]
