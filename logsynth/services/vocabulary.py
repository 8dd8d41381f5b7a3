# file: logsynth/services/vocabulary.py
import logging
from typing import List, Optional

from faker import Faker

log = logging.getLogger("logsynth.services.vocabulary")

# Login page loads: five image fetches plus the login itself.
BASE_OPERATIONS = ["login", "logout"] + [f"static/image-{i}" for i in range(5)]

MAX_ATTEMPTS_PER_TOKEN = 50

def build_vocabulary(size: int, seed: Optional[int] = None) -> List[str]:
    """
    Returns `size` distinct operation tokens, most popular first.

    The fixed login/image tokens lead the list; the rest are Faker URI paths.
    The same seed always produces the same vocabulary.
    """
    if size <= 0:
        return []
    if size <= len(BASE_OPERATIONS):
        return BASE_OPERATIONS[:size]

    fake = Faker()
    if seed is not None:
        fake.seed_instance(seed)

    tokens = list(BASE_OPERATIONS)
    seen = set(tokens)
    attempts = 0
    while len(tokens) < size:
        attempts += 1
        if attempts > size * MAX_ATTEMPTS_PER_TOKEN:
            # Faker's word list ran dry; number the remainder.
            token = f"api/op-{len(tokens)}"
        else:
            token = fake.uri_path(deep=fake.random_int(1, 3))
        if token in seen or any(c.isspace() for c in token):
            continue
        seen.add(token)
        tokens.append(token)

    log.debug(f"Built operation vocabulary of {len(tokens)} tokens after {attempts} draws.")
    return tokens
