# file: generate_logs.py
"""
Event-log corpus generator for anomaly-detection testing.

Writes a stream of synthetic user actions, one per line, in which a few
users, operations and source addresses dominate (Zipfian popularity) and each
user's events arrive in session-like bursts. The same --seed always
reproduces the same corpus.

Defaults come from LOGSYNTH_* environment variables (or .env); command-line
flags override them.
"""

import argparse
import logging
import pathlib
import time

from logsynth.core.config import settings
from logsynth.schemas.models import GeneratorConfig
from logsynth.services.formatters import FORMATTERS, create_formatter
from logsynth.services.log_generator import LogGenerator

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
log = logging.getLogger("generate_logs")

# --- Configuration Defaults ---
DEFAULT_COUNT = 100_000
DEFAULT_OUTPUT_FILE = "logs/events.log"
BATCH_SIZE = 1000
PROGRESS_EVERY = 100_000

def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Applies command-line overrides on top of the environment settings."""
    overrides = {
        "USER_UNIVERSE_SIZE": args.users,
        "USER_SKEW": args.user_skew,
        "OPERATION_COUNT": args.operations,
        "OPERATION_SKEW": args.operation_skew,
        "ADDRESS_UNIVERSE_SIZE": args.addresses,
        "ADDRESS_SKEW": args.address_skew,
        "SEED": args.seed,
    }
    effective = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    return GeneratorConfig.from_settings(effective)

def main(args: argparse.Namespace) -> int:
    """Generates args.count events into args.output_file. Returns the number written."""
    output_file = pathlib.Path(args.output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    seed = args.seed if args.seed is not None else settings.SEED
    generator = LogGenerator(build_config(args), seed=seed)

    log.info(f"Generating {args.count} events (format={args.format}, seed={seed}) into {output_file}")
    started = time.time()
    written = 0

    with open(output_file, "w", encoding="utf-8") as f:
        formatter = create_formatter(args.format, f)
        batch = []
        while written < args.count:
            batch.append(formatter.format(generator.sample_event()))
            written += 1

            # Batch write every BATCH_SIZE events
            if len(batch) >= BATCH_SIZE:
                formatter.write_lines(batch)
                batch.clear()

            if written % PROGRESS_EVERY == 0:
                log.info(f"{written}/{args.count} events, {len(generator.sessions)} distinct users so far")

        # Flush remaining batch
        if batch:
            formatter.write_lines(batch)

    log.info(f"Completed. Generated {written} events in '{output_file}' ({time.time() - started:.1f}s).")
    return written

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Zipfian event-log generator for anomaly-detection tests")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="Number of events to generate")
    parser.add_argument("--users", type=int, default=None, help="Size of the user id universe")
    parser.add_argument("--user_skew", type=float, default=None, help="Zipf exponent for users (0-1)")
    parser.add_argument("--operations", type=int, default=None, help="Size of the operation vocabulary")
    parser.add_argument("--operation_skew", type=float, default=None, help="Zipf exponent for operations (0-1)")
    parser.add_argument("--addresses", type=int, default=None, help="Size of the source address universe")
    parser.add_argument("--address_skew", type=float, default=None, help="Zipf exponent for addresses (0-1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible corpus")
    parser.add_argument("--format", choices=sorted(FORMATTERS), default="event", help="Output line format")
    parser.add_argument("--output_file", type=str, default=DEFAULT_OUTPUT_FILE, help="Output file path")
    return parser.parse_args(argv)

if __name__ == "__main__":
    main(parse_args())
