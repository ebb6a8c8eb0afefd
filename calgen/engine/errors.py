from __future__ import annotations


class CalendarError(Exception):
    """Base class for errors raised by calgen."""


class LoadError(CalendarError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Could not load events from {source}: {reason}")
        self.source = source
        self.reason = reason


class UnknownLayoutError(CalendarError, ValueError):
    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(f"Unknown layout '{name}'. Available: {', '.join(available)}")
        self.name = name
