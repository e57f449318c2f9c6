"""The five invocable matching-lines commands."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine

from .dispatcher import InvocationOutcome, Mode, ModeDispatcher

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CommandSpec:
    """Declarative definition of one command entry point."""

    command_id: str
    title: str
    mode: Mode
    send_to_new_document: bool = False
    shortcut: str | None = None


COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("matchlines.deleteLines", "Delete Matching Lines", Mode.DELETE, shortcut="Ctrl+Alt+D"),
    CommandSpec("matchlines.cutLines", "Cut Matching Lines", Mode.CUT, shortcut="Ctrl+Alt+X"),
    CommandSpec("matchlines.copyLines", "Copy Matching Lines", Mode.COPY, shortcut="Ctrl+Alt+C"),
    CommandSpec(
        "matchlines.cutLinesToNewDocument",
        "Cut Matching Lines To New Document",
        Mode.CUT,
        send_to_new_document=True,
    ),
    CommandSpec(
        "matchlines.copyLinesToNewDocument",
        "Copy Matching Lines To New Document",
        Mode.COPY,
        send_to_new_document=True,
    ),
)


@dataclass(slots=True)
class CommandBinding:
    """A command bound to a dispatcher, ready to be hooked into menus."""

    spec: CommandSpec
    dispatcher: ModeDispatcher
    pending: set[asyncio.Future[Any]] = field(default_factory=set)

    async def run(self) -> InvocationOutcome:
        return await self.dispatcher.execute(
            self.spec.mode,
            self.spec.send_to_new_document,
            title=self.spec.title,
        )

    def trigger(self, *, spawn: Callable[[Coroutine[Any, Any, InvocationOutcome]], Any] | None = None) -> Any:
        """Schedule :meth:`run` on the running loop (or via ``spawn``)."""

        coroutine = self.run()
        if spawn is not None:
            return spawn(coroutine)
        task = asyncio.ensure_future(coroutine)
        self.pending.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Future[Any]) -> None:
        self.pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Command %s raised", self.spec.command_id, exc_info=exc)


def get_command(command_id: str) -> CommandSpec:
    for spec in COMMANDS:
        if spec.command_id == command_id:
            return spec
    raise KeyError(f"Unknown command: {command_id}")


def register_commands(dispatcher: ModeDispatcher) -> dict[str, CommandBinding]:
    """Bind every command to ``dispatcher``, keyed by command id."""

    bindings = {spec.command_id: CommandBinding(spec=spec, dispatcher=dispatcher) for spec in COMMANDS}
    LOGGER.debug("Registered %d matching-lines commands", len(bindings))
    return bindings


async def run_command(dispatcher: ModeDispatcher, command_id: str) -> InvocationOutcome:
    """Run the command identified by ``command_id`` to completion."""

    return await CommandBinding(spec=get_command(command_id), dispatcher=dispatcher).run()


__all__ = [
    "CommandSpec",
    "COMMANDS",
    "CommandBinding",
    "get_command",
    "register_commands",
    "run_command",
]
