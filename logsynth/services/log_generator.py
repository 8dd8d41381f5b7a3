# file: logsynth/services/log_generator.py
import logging
import math
from typing import Dict, Iterator, List, Optional

import numpy as np
from pydantic import BaseModel

from logsynth.core.errors import ConfigurationError
from logsynth.schemas.models import Event, GeneratorConfig
from logsynth.services.event_codec import EventCodec
from logsynth.services.key_sampler import CumulativeSampler, WeightedKeySampler

log = logging.getLogger("logsynth.services.log_generator")

ADDRESS_SPACE = 2 ** 32

class Session(BaseModel):
    """Per-user state: time of the last event and the open session, if any."""
    last_millis: int
    remaining: int = 0
    address: int = 0


class LogGenerator:
    """
    Produces an unbounded, pull-based stream of serialized Events.

    Users, operations and addresses each come from their own long-tailed
    sampler. Time follows a session model: a user who is drawn while a session
    is open gets an event shortly after their previous one, otherwise a new
    session starts at the advancing global clock. This keeps each user's
    history in time order and bursty, while the interleaved stream is not
    globally sorted.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.config = config
        self._validate_config(config)
        if rng is not None and seed is not None:
            raise ConfigurationError("Pass either an rng or a seed, not both.")

        self.rng = rng if rng is not None else np.random.default_rng(seed)
        user_rng, op_rng, address_rng, time_rng = self.rng.spawn(4)

        self.user_sampler = WeightedKeySampler(config.user_universe_size, config.user_skew, rng=user_rng)
        self.address_sampler = WeightedKeySampler(config.address_universe_size, config.address_skew, rng=address_rng)

        vocabulary = config.operation_vocabulary
        if isinstance(vocabulary, dict):
            self.operations: List[str] = list(vocabulary.keys())
            self.operation_sampler = CumulativeSampler(list(vocabulary.values()), rng=op_rng)
        else:
            self.operations = list(vocabulary)
            self.operation_sampler = WeightedKeySampler(len(self.operations), config.operation_skew, rng=op_rng)

        # Odd multiplier makes key -> address a bijection on 32 bits.
        self._address_multiplier = int(address_rng.integers(0, ADDRESS_SPACE // 2)) * 2 + 1
        self._address_offset = int(address_rng.integers(0, ADDRESS_SPACE))

        self.time_rng = time_rng
        self.clock = config.time_model.start_millis
        self.sessions: Dict[int, Session] = {}
        self.count = 0

        log.info(
            f"Log generator ready: {config.user_universe_size} users, "
            f"{len(self.operations)} operations, {config.address_universe_size} addresses."
        )

    @staticmethod
    def _validate_config(config: GeneratorConfig) -> None:
        vocabulary = config.operation_vocabulary
        if not vocabulary:
            raise ConfigurationError("Operation vocabulary must not be empty.")
        tokens = list(vocabulary)
        if len(set(tokens)) != len(tokens):
            raise ConfigurationError("Operation vocabulary contains duplicate tokens.")
        for token in tokens:
            if not token or any(c.isspace() for c in token):
                raise ConfigurationError(f"Operation token {token!r} is empty or contains whitespace.")

        if config.user_universe_size < 1:
            raise ConfigurationError(f"user_universe_size must be positive, got {config.user_universe_size}.")
        if config.address_universe_size < 1:
            raise ConfigurationError(f"address_universe_size must be positive, got {config.address_universe_size}.")

        tm = config.time_model
        for name in ("mean_session_gap_ms", "mean_event_gap_ms", "session_timeout_ms"):
            value = getattr(tm, name)
            if not (math.isfinite(value) and value > 0):
                raise ConfigurationError(f"time_model.{name} must be positive, got {value}.")
        if not (math.isfinite(tm.mean_session_length) and tm.mean_session_length >= 0):
            raise ConfigurationError(f"time_model.mean_session_length must be non-negative, got {tm.mean_session_length}.")

    def _to_address(self, key: int) -> int:
        raw = (key * self._address_multiplier + self._address_offset) % ADDRESS_SPACE
        return raw - ADDRESS_SPACE if raw >= ADDRESS_SPACE // 2 else raw

    def _new_session(self, previous: Optional[Session]) -> Session:
        tm = self.config.time_model
        self.clock += int(round(self.time_rng.exponential(tm.mean_session_gap_ms)))
        start = self.clock if previous is None else max(self.clock, previous.last_millis)
        length = 1 + int(self.time_rng.exponential(tm.mean_session_length)) if tm.mean_session_length > 0 else 1
        return Session(
            last_millis=start,
            remaining=length,
            address=self._to_address(self.address_sampler.sample_key()),
        )

    def _advance(self, user_id: int) -> Session:
        tm = self.config.time_model
        session = self.sessions.get(user_id)
        is_open = (
            session is not None
            and session.remaining > 0
            and self.clock <= session.last_millis + tm.session_timeout_ms
        )
        if is_open:
            session.last_millis += int(round(self.time_rng.exponential(tm.mean_event_gap_ms)))
        else:
            session = self._new_session(session)
            self.sessions[user_id] = session
        session.remaining -= 1
        return session

    def sample_event(self) -> Event:
        user_id = self.user_sampler.sample_key()
        operation = self.operations[self.operation_sampler.sample_key()]
        session = self._advance(user_id)
        if self.config.address_per_session:
            address = session.address
        else:
            address = self._to_address(self.address_sampler.sample_key())

        self.count += 1
        return Event(
            user_id=user_id,
            timestamp_millis=session.last_millis,
            operation=operation,
            ip_address=address,
        )

    def sample(self) -> str:
        return EventCodec.serialize(self.sample_event())

    def take(self, n: int) -> List[str]:
        return [self.sample() for _ in range(n)]

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return self.sample()
