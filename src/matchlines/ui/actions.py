"""Menu action data structures used by the main window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ..commands.registry import COMMANDS, CommandBinding

MATCHING_LINES_MENU = "matching_lines"


@dataclass(slots=True)
class WindowAction:
    """Represents a high-level action exposed through menus."""

    name: str
    text: str
    shortcut: str | None = None
    status_tip: str | None = None
    callback: Callable[[], Any] | None = None

    def trigger(self) -> None:
        """Invoke the registered callback, if available."""

        if self.callback is not None:
            self.callback()


@dataclass(slots=True)
class MenuSpec:
    """Declarative menu definition used for headless + Qt builds."""

    name: str
    title: str
    actions: tuple[str, ...]


def command_actions(bindings: Mapping[str, CommandBinding]) -> dict[str, WindowAction]:
    """Return one :class:`WindowAction` per bound command, in menu order."""

    actions: dict[str, WindowAction] = {}
    for spec in COMMANDS:
        binding = bindings.get(spec.command_id)
        if binding is None:
            continue
        actions[spec.command_id] = WindowAction(
            name=spec.command_id,
            text=spec.title,
            shortcut=spec.shortcut,
            status_tip=f"{spec.title} (regular expression)",
            callback=binding.trigger,
        )
    return actions


def default_menus(file_actions: tuple[str, ...] = ()) -> dict[str, MenuSpec]:
    menus: dict[str, MenuSpec] = {}
    if file_actions:
        menus["file"] = MenuSpec(name="file", title="&File", actions=file_actions)
    menus[MATCHING_LINES_MENU] = MenuSpec(
        name=MATCHING_LINES_MENU,
        title="&Matching Lines",
        actions=tuple(spec.command_id for spec in COMMANDS),
    )
    return menus


__all__ = ["MATCHING_LINES_MENU", "WindowAction", "MenuSpec", "command_actions", "default_menus"]
