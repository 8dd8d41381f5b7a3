# file: tests/test_event_codec.py
import io
import pathlib

import pytest
from pydantic import ValidationError

from logsynth.core.errors import EventFormatError, EventFormatException, StreamFault
from logsynth.schemas.models import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, Event
from logsynth.services.event_codec import EventCodec

DATA = pathlib.Path(__file__).parent / "data"

class FailingStream:
    def readline(self):
        raise OSError("device not ready")

    def write(self, text):
        raise OSError("disk full")

# --- Reading ---
def test_read_reference_events():
    with open(DATA / "events.txt", encoding="utf-8") as f:
        ev = EventCodec.read(f)
        assert ev.user_id == 444691
        assert ev.timestamp_millis == 1382920806122
        assert ev.operation == "static/image-4"
        assert ev.ip_address == -599092377

        ev = EventCodec.read(f)
        assert ev.user_id == 49664
        assert ev.timestamp_millis == 1382926154968
        assert ev.operation == "login"
        assert ev.ip_address == 950354974

        assert EventCodec.read(f) is None

def test_last_line_without_newline_is_complete():
    stream = io.StringIO("1 2 login 3")
    assert EventCodec.read(stream) == Event(user_id=1, timestamp_millis=2, operation="login", ip_address=3)
    assert EventCodec.read(stream) is None

def test_crlf_line_endings_are_accepted():
    assert EventCodec.read(io.StringIO("7 8 logout -9\r\n")).ip_address == -9

def test_iter_events_reads_to_end():
    with open(DATA / "events.txt", encoding="utf-8") as f:
        events = list(EventCodec.iter_events(f))
    assert [e.user_id for e in events] == [444691, 49664]

def test_empty_stream_is_end_of_input():
    assert EventCodec.read(io.StringIO("")) is None

# --- Malformed input ---
@pytest.mark.parametrize("line", [
    "abc 123 op 5",            # non-numeric user id
    "1 2 3",                   # too few fields
    "1 2 op 3 4",              # too many fields
    "1  2 op 3",               # doubled separator
    "1\t2\top\t3",             # wrong separator
    "",                        # blank line
    "1 2.5 op 3",              # fractional timestamp
    "+1 2 op 3",               # explicit plus sign
    "1 2 op 0x10",             # hex address
    "1 2 op 1_000",            # digit grouping
    "١ 2 op 3",           # non-ASCII digit
    "-1 2 op 3",               # negative user id
    "1 2 op 2147483648",       # address above 32 bits
    "1 9223372036854775808 op 3",  # timestamp above 64 bits
    "1" * 5000 + " 2 op 3",    # numeral too long to convert
    "1 2 op " + "0" * 20,      # over-long address, even if zero
])
def test_malformed_line_raises_format_error(line):
    with pytest.raises(EventFormatError) as e:
        EventCodec.read(io.StringIO(line + "\n"))
    assert e.value.line == line

def test_format_error_alias():
    with pytest.raises(EventFormatException):
        EventCodec.parse("abc 123 op 5")

def test_reader_does_not_resynchronize():
    stream = io.StringIO("garbage\n5 6 login 7\n")
    with pytest.raises(EventFormatError):
        EventCodec.read(stream)
    # skipping is up to the caller: the next read starts on the next line
    assert EventCodec.read(stream).user_id == 5

# --- Stream faults ---
def test_undecodable_bytes_are_a_stream_fault():
    stream = io.TextIOWrapper(io.BytesIO(b"\xff 2 op 3\n1 2 login 3\n"), encoding="utf-8")
    with pytest.raises(StreamFault) as e:
        EventCodec.read(stream)
    assert isinstance(e.value.__cause__, UnicodeDecodeError)
    # the decoder swallowed the following record too, so skipping would lose it
    assert not isinstance(e.value, EventFormatError)

def test_closed_stream_is_a_stream_fault():
    stream = io.StringIO("1 2 login 3\n")
    stream.close()
    with pytest.raises(StreamFault):
        EventCodec.read(stream)
    with pytest.raises(StreamFault):
        EventCodec.write(Event(user_id=1, timestamp_millis=2, operation="login", ip_address=3), stream)

def test_read_fault_is_a_stream_fault():
    with pytest.raises(StreamFault) as e:
        EventCodec.read(FailingStream())
    assert isinstance(e.value.__cause__, OSError)

def test_write_fault_is_a_stream_fault():
    ev = Event(user_id=1, timestamp_millis=2, operation="login", ip_address=3)
    with pytest.raises(StreamFault):
        EventCodec.write(ev, FailingStream())

# --- Serialization ---
def test_serialize_is_one_space_separated_line():
    ev = Event(user_id=444691, timestamp_millis=1382920806122, operation="static/image-4", ip_address=-599092377)
    assert EventCodec.serialize(ev) == "444691 1382920806122 static/image-4 -599092377"

def test_write_appends_newline():
    out = io.StringIO()
    EventCodec.write(Event(user_id=0, timestamp_millis=0, operation="x", ip_address=0), out)
    assert out.getvalue() == "0 0 x 0\n"

@pytest.mark.parametrize("ev", [
    Event(user_id=0, timestamp_millis=0, operation="login", ip_address=0),
    Event(user_id=INT32_MAX, timestamp_millis=INT64_MAX, operation="a/b/c", ip_address=INT32_MAX),
    Event(user_id=12, timestamp_millis=INT64_MIN, operation="static/image-4", ip_address=INT32_MIN),
    Event(user_id=49664, timestamp_millis=-1, operation="café", ip_address=-1),
])
def test_round_trip(ev):
    assert EventCodec.parse(EventCodec.serialize(ev)) == ev
    out = io.StringIO()
    EventCodec.write(ev, out)
    out.seek(0)
    assert EventCodec.read(out) == ev

# --- Event record ---
def test_event_is_immutable():
    ev = Event(user_id=1, timestamp_millis=2, operation="login", ip_address=3)
    with pytest.raises(ValidationError):
        ev.user_id = 5

@pytest.mark.parametrize("fields", [
    {"user_id": "1", "timestamp_millis": 2, "operation": "login", "ip_address": 3},
    {"user_id": 1, "timestamp_millis": 2, "operation": "two words", "ip_address": 3},
    {"user_id": 1, "timestamp_millis": 2, "operation": "", "ip_address": 3},
    {"user_id": 1, "timestamp_millis": 2, "operation": "login", "ip_address": 2 ** 31},
])
def test_event_rejects_invalid_fields(fields):
    with pytest.raises(ValidationError):
        Event(**fields)

def test_events_sort_by_user_then_time():
    a = Event(user_id=2, timestamp_millis=5, operation="login", ip_address=1)
    b = Event(user_id=1, timestamp_millis=9, operation="login", ip_address=1)
    c = Event(user_id=1, timestamp_millis=3, operation="logout", ip_address=1)
    assert sorted([a, b, c]) == [c, b, a]
    assert len({a, b, c, Event(user_id=2, timestamp_millis=5, operation="login", ip_address=1)}) == 3
