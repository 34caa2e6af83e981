"""Controller layer for decoupling UI state management from widgets."""

from .session import (
    BorderSessionController,
    DirectoryKind,
    DirectoryPicked,
    ItemComplete,
    PreviewReady,
    SessionEvent,
    default_options,
)

__all__ = [
    "BorderSessionController",
    "DirectoryKind",
    "DirectoryPicked",
    "ItemComplete",
    "PreviewReady",
    "SessionEvent",
    "default_options",
]
