# file: inspect_logs.py
import argparse
import logging
import pathlib
from collections import Counter
from typing import Any, Dict, IO

from logsynth.core.errors import EventFormatError
from logsynth.services.event_codec import EventCodec

# --- Production-minded logging setup ---
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
log = logging.getLogger("inspect_logs")

TOP_N = 5

def summarize(stream: IO[str], top: int = TOP_N) -> Dict[str, Any]:
    """
    Reads every event from `stream`, skipping lines that fail to parse.

    Returns parse counts, distinct users, the most active users and
    operations, and how many events arrived earlier than the same user's
    previous event.
    """
    users: Counter = Counter()
    operations: Counter = Counter()
    last_seen: Dict[int, int] = {}
    parse_ok = parse_fail = out_of_order = 0
    line_no = 0

    while True:
        line_no += 1
        try:
            event = EventCodec.read(stream)
        except EventFormatError as e:
            # The codec does not resynchronize; the next read starts on the next line.
            parse_fail += 1
            log.warning(f"Skipping line {line_no}: {e}")
            continue
        if event is None:
            break

        parse_ok += 1
        users[event.user_id] += 1
        operations[event.operation] += 1
        previous = last_seen.get(event.user_id)
        if previous is not None and event.timestamp_millis < previous:
            out_of_order += 1
        last_seen[event.user_id] = event.timestamp_millis

    return {
        "parse_success": parse_ok,
        "parse_fail": parse_fail,
        "distinct_users": len(users),
        "distinct_operations": len(operations),
        "top_users": users.most_common(top),
        "top_operations": operations.most_common(top),
        "out_of_order": out_of_order,
    }

def main():
    parser = argparse.ArgumentParser(description="Summarize an event log written by generate_logs.py.")
    parser.add_argument("--file", required=True, type=pathlib.Path, help="Path to the event log file.")
    parser.add_argument("--top", type=int, default=TOP_N, help="How many top users/operations to report.")
    args = parser.parse_args()

    if not args.file.exists():
        log.error(f"File not found: {args.file}")
        return

    log.info(f"Processing file: {args.file}")
    with open(args.file, "r", encoding="utf-8", errors="replace") as f:
        summary = summarize(f, top=args.top)

    log.info({"status": "complete", **summary})

if __name__ == "__main__":
    main()
