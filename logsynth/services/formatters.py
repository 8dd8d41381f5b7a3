# file: logsynth/services/formatters.py
import ipaddress
import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import IO

from logsynth.core.errors import ConfigurationError, StreamFault
from logsynth.schemas.models import Event
from logsynth.services.event_codec import EventCodec

ADDRESS_SPACE = 2 ** 32

def to_dotted_quad(ip: int) -> str:
    """Renders a signed 32-bit address as a.b.c.d."""
    return str(ipaddress.IPv4Address(ip % ADDRESS_SPACE))

def from_dotted_quad(text: str) -> int:
    """Parses a.b.c.d into the signed 32-bit form used by Event."""
    raw = int(ipaddress.IPv4Address(text))
    return raw - ADDRESS_SPACE if raw >= ADDRESS_SPACE // 2 else raw


class EventFormatter(ABC):
    """Writes Events to a text stream, one per line."""

    def __init__(self, stream: IO[str]) -> None:
        self.stream = stream

    @abstractmethod
    def format(self, event: Event) -> str:
        pass

    def write(self, event: Event) -> None:
        self.write_lines([self.format(event)])

    def write_lines(self, lines) -> None:
        try:
            self.stream.write("".join(line + "\n" for line in lines))
        except OSError as e:
            raise StreamFault(f"Failed to write events: {e}") from e


class TextFormatter(EventFormatter):
    def format(self, event: Event) -> str:
        return EventCodec.serialize(event)


class JsonFormatter(EventFormatter):
    def format(self, event: Event) -> str:
        t = datetime.fromtimestamp(event.timestamp_millis / 1000, tz=timezone.utc)
        return json.dumps({
            "user_id": event.user_id,
            "time": t.isoformat(timespec="milliseconds"),
            "timestamp_millis": event.timestamp_millis,
            "operation": event.operation,
            "ip": to_dotted_quad(event.ip_address),
            "ip_address": event.ip_address,
        })


FORMATTERS = {
    "event": TextFormatter,
    "jsonl": JsonFormatter,
}

def create_formatter(kind: str, stream: IO[str]) -> EventFormatter:
    try:
        return FORMATTERS[kind](stream)
    except KeyError:
        raise ConfigurationError(f"Unknown output format {kind!r}; expected one of {sorted(FORMATTERS)}.") from None
