# file: logsynth/services/event_codec.py
import logging
import re
from typing import IO, Iterator, Optional

from pydantic import ValidationError

from logsynth.core.errors import EventFormatError, StreamFault
from logsynth.schemas.models import Event

log = logging.getLogger("logsynth.services.event_codec")

SEPARATOR = " "
FIELD_COUNT = 4
# 19 digits hold any signed 64-bit value
DECIMAL_PATTERN = re.compile(r"-?[0-9]{1,19}")

class EventCodec:
    """
    Compact one-line text form of an Event:

        <user_id> <timestamp_millis> <operation> <ip_address>

    Fields are separated by a single space. Parsing is strict: a bad line
    raises EventFormatError and the reader does not try to resynchronize.
    """

    @staticmethod
    def serialize(event: Event) -> str:
        return SEPARATOR.join((
            str(event.user_id),
            str(event.timestamp_millis),
            event.operation,
            str(event.ip_address),
        ))

    @staticmethod
    def write(event: Event, stream: IO[str]) -> None:
        try:
            stream.write(EventCodec.serialize(event) + "\n")
        except (OSError, ValueError) as e:
            raise StreamFault(f"Failed to write event: {e}") from e

    @staticmethod
    def parse(line: str) -> Event:
        fields = line.split(SEPARATOR)
        if len(fields) != FIELD_COUNT:
            raise EventFormatError(line, f"expected {FIELD_COUNT} fields, found {len(fields)}")

        uid, ts, op, ip = fields
        for name, value in (("user_id", uid), ("timestamp_millis", ts), ("ip_address", ip)):
            if not DECIMAL_PATTERN.fullmatch(value):
                raise EventFormatError(line, f"{name} is not a decimal integer")

        try:
            return Event(user_id=int(uid), timestamp_millis=int(ts), operation=op, ip_address=int(ip))
        except ValidationError as e:
            raise EventFormatError(line, f"{e.error_count()} invalid field(s)") from e

    @staticmethod
    def read(stream: IO[str]) -> Optional[Event]:
        """Consumes one line from `stream`. Returns None at end of input."""
        try:
            line = stream.readline()
        except UnicodeDecodeError as e:
            # the decoder has already consumed past this line; later reads lose data
            raise StreamFault(f"Undecodable bytes in stream: {e}") from e
        except (OSError, ValueError) as e:
            # ValueError: I/O operation on a closed stream
            raise StreamFault(f"Failed to read from stream: {e}") from e

        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return EventCodec.parse(line)

    @staticmethod
    def iter_events(stream: IO[str]) -> Iterator[Event]:
        while True:
            event = EventCodec.read(stream)
            if event is None:
                return
            yield event
