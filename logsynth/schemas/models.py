# file: logsynth/schemas/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Union

from logsynth.core.config import Settings
from logsynth.services.vocabulary import build_vocabulary

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

DEFAULT_START_MILLIS = 1_382_920_800_000

# --- Event Records ---
class Event(BaseModel):
    """One user action. Immutable; built by the generator or by the parser."""
    model_config = ConfigDict(frozen=True, strict=True)

    user_id: int = Field(ge=0, le=INT32_MAX)
    timestamp_millis: int = Field(ge=INT64_MIN, le=INT64_MAX)
    operation: str = Field(min_length=1, pattern=r"^\S+$")
    ip_address: int = Field(ge=INT32_MIN, le=INT32_MAX)  # 4 octets, two's-complement

    def sort_key(self):
        return (self.user_id, self.timestamp_millis, self.ip_address, self.operation)

    def __lt__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.sort_key() < other.sort_key()

# --- Generator Configuration ---
class TimeModel(BaseModel):
    start_millis: int = DEFAULT_START_MILLIS
    mean_session_gap_ms: float = 1_500.0   # between session starts, whole stream
    mean_event_gap_ms: float = 20_000.0    # between events inside one session
    mean_session_length: float = 4.0       # extra events after the first
    session_timeout_ms: int = 30 * 60 * 1000

class GeneratorConfig(BaseModel):
    user_universe_size: int
    user_skew: float = 0.8
    # a list is ranked by popularity; a mapping carries explicit weights
    operation_vocabulary: Union[List[str], Dict[str, float]]
    operation_skew: float = 1.0
    address_universe_size: int
    address_skew: float = 0.5
    address_per_session: bool = True
    time_model: TimeModel = Field(default_factory=TimeModel)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeneratorConfig":
        return cls(
            user_universe_size=settings.USER_UNIVERSE_SIZE,
            user_skew=settings.USER_SKEW,
            operation_vocabulary=build_vocabulary(settings.OPERATION_COUNT, seed=settings.SEED),
            operation_skew=settings.OPERATION_SKEW,
            address_universe_size=settings.ADDRESS_UNIVERSE_SIZE,
            address_skew=settings.ADDRESS_SKEW,
            address_per_session=settings.ADDRESS_PER_SESSION,
            time_model=TimeModel(
                start_millis=settings.START_MILLIS,
                mean_session_gap_ms=settings.MEAN_SESSION_GAP_MS,
                mean_event_gap_ms=settings.MEAN_EVENT_GAP_MS,
                mean_session_length=settings.MEAN_SESSION_LENGTH,
                session_timeout_ms=settings.SESSION_TIMEOUT_MS,
            ),
        )
