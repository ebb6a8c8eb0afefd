from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from ..config import EVENT_CATEGORIES
from .dates import ordinal
from .errors import LoadError

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])$")

# category -> word rewritten in the first line
COUNTED_WORDS: Dict[str, str] = {
    "birthday": "Birthday",
    "anniversary": "Anniversary",
}


@dataclass(frozen=True)
class EventRecord:
    category: str
    lines: List[str] = field(default_factory=list)
    origin_year: Optional[int] = None

    def to_json(self) -> dict:
        return {"type": self.category, "lines": list(self.lines), "originalYear": self.origin_year}


@dataclass(frozen=True)
class RenderedAnnotation:
    category: str
    lines: List[str]

    @property
    def visible_lines(self) -> List[str]:
        return [line for line in self.lines if line.strip()]


def rewrite_lines(record: EventRecord, target_year: int) -> List[str]:
    lines = list(record.lines)
    word = COUNTED_WORDS.get(record.category)
    if record.origin_year is None or word is None:
        return lines

    elapsed = target_year - record.origin_year
    if elapsed < 0 or not lines or not lines[0]:
        return lines

    count = ordinal(elapsed)
    first = lines[0]
    if word.lower() in first.lower():
        lines[0] = re.sub(re.escape(word), f"{count} {word}", first, flags=re.IGNORECASE)
    else:
        lines[0] = f"{first} ({count})"
    return lines


def _parse_record(key: str, raw: Any) -> EventRecord:
    if not KEY_PATTERN.match(str(key)):
        raise ValueError(f"key {key!r} is not in MM-DD format")
    if not isinstance(raw, dict):
        raise ValueError(f"event {key} must be an object")
    category = raw.get("type")
    if category not in EVENT_CATEGORIES:
        raise ValueError(f"event {key} has unsupported type {category!r}")
    lines = raw.get("lines", [])
    if not isinstance(lines, list) or not all(isinstance(line, str) for line in lines):
        raise ValueError(f"event {key} lines must be a list of strings")
    origin = raw.get("originalYear")
    if origin is not None and (isinstance(origin, bool) or not isinstance(origin, int)):
        raise ValueError(f"event {key} originalYear must be an integer or null")
    return EventRecord(category=category, lines=list(lines), origin_year=origin)


def parse_events(payload: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, EventRecord]:
    if isinstance(payload, (str, bytes)):
        payload = json.loads(payload)
    if not isinstance(payload, Mapping):
        raise ValueError("events payload must be an object keyed by MM-DD")
    return {str(key): _parse_record(key, raw) for key, raw in payload.items()}


class EventStore:
    """
    Date-keyed annotations ("MM-DD" -> EventRecord).

    Each render call should get its own store when requests can overlap;
    DEFAULT_STORE is only meant for single-shot command line use.
    """

    def __init__(self, events: Optional[Mapping[str, EventRecord]] = None) -> None:
        self._events: Dict[str, EventRecord] = dict(events or {})

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, key: object) -> bool:
        return key in self._events

    def keys(self) -> Iterator[str]:
        return iter(sorted(self._events))

    def lookup(self, key: str) -> Optional[EventRecord]:
        return self._events.get(key)

    def has_event(self, key: str) -> bool:
        return key in self._events

    def render(self, key: str, target_year: int) -> Optional[RenderedAnnotation]:
        record = self._events.get(key)
        if record is None:
            return None
        return RenderedAnnotation(category=record.category, lines=rewrite_lines(record, target_year))

    def put(self, key: str, record: EventRecord) -> None:
        if not KEY_PATTERN.match(key):
            raise ValueError(f"Event key must be MM-DD, got {key!r}")
        self._events[key] = record

    def clear(self) -> None:
        self._events = {}

    def load(self, source: Union[str, bytes, Mapping[str, Any]], name: str = "<memory>") -> None:
        """Replace every event with the ones in `source`; nothing changes if it is invalid."""
        try:
            events = parse_events(source)
        except (ValueError, TypeError) as exc:
            raise LoadError(name, str(exc)) from exc
        self._events = events
        logger.info("Loaded %d events from %s", len(events), name)

    def dump(self) -> str:
        return json.dumps({key: self._events[key].to_json() for key in self.keys()}, indent=2)


def sample_events() -> Dict[str, EventRecord]:
    return {
        "11-05": EventRecord("birthday", ["Sarah's Birthday", "Cake at noon", ""], 2004),
        "11-14": EventRecord("anniversary", ["Wedding Anniversary", "Dinner reservation 7pm", ""], 2015),
        "12-25": EventRecord("public", ["Christmas Day", "Family gathering", ""], None),
    }


DEFAULT_STORE = EventStore(sample_events())
