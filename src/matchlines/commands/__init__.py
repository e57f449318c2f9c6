"""Matching-lines commands: dispatcher, registry and invocation lock."""

from .dispatcher import InvocationOutcome, Mode, ModeDispatcher, format_report, new_document_title
from .lock import InvocationLock, LockSession
from .registry import COMMANDS, CommandBinding, CommandSpec, get_command, register_commands, run_command

__all__ = [
    "InvocationOutcome",
    "Mode",
    "ModeDispatcher",
    "format_report",
    "new_document_title",
    "InvocationLock",
    "LockSession",
    "COMMANDS",
    "CommandBinding",
    "CommandSpec",
    "get_command",
    "register_commands",
    "run_command",
]
