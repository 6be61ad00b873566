"""Random data generators and comparison helpers used by tests and benchmarks."""

from __future__ import annotations

import logging
import os
import random
from collections import Counter
from typing import Iterable, List, Sequence

__all__ = [
    "SEED_ENV_VAR",
    "get_rng",
    "init",
    "get_random_byte_vec",
    "get_random_vec_of_byte_vec",
    "get_ascending_vec_of_byte_vec_0x",
    "get_ascending_vec_of_byte_vec_02x",
    "compare_unordered_byte_vecs",
]

SEED_ENV_VAR = "CRUSTY_SEED"

_log = logging.getLogger(__name__)


def get_rng() -> random.Random:
    """Return a random generator seeded from CRUSTY_SEED, or randomly if unset or invalid."""
    seed_str = os.environ.get(SEED_ENV_VAR)
    if seed_str is None:
        seed = random.getrandbits(64)
        _log.debug("No %s provided, using random seed: %d", SEED_ENV_VAR, seed)
        return random.Random(seed)
    try:
        seed = int(seed_str)
        if not 0 <= seed < 2**64:
            raise ValueError(seed_str)
    except ValueError:
        seed = random.getrandbits(64)
        _log.debug("Failed to parse %s, using random seed: %d", SEED_ENV_VAR, seed)
        return random.Random(seed)
    _log.debug("Using seed from %s: %d", SEED_ENV_VAR, seed)
    return random.Random(seed)


def init() -> None:
    """Configure the root logger for tests at the most verbose level.

    A handler is attached only if the root logger has none yet, so repeated
    calls leave a single handler in place.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s")
        )
        root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def get_random_byte_vec(rng: random.Random, n: int) -> bytes:
    """Return ``n`` random bytes."""
    return bytes(rng.getrandbits(8) for _ in range(n))


def _sizes(rng: random.Random, n: int, min_size: int, max_size: int) -> Iterable[int]:
    if max_size < min_size:
        raise ValueError(f"max_size {max_size} is smaller than min_size {min_size}")
    for _ in range(n):
        yield min_size if max_size == min_size else rng.randrange(min_size, max_size)


def get_random_vec_of_byte_vec(
    rng: random.Random, n: int, min_size: int, max_size: int
) -> List[bytes]:
    """Return ``n`` random byte strings with lengths in [min_size, max_size).

    When both bounds are equal every string has exactly that length.
    """
    return [get_random_byte_vec(rng, size) for size in _sizes(rng, n, min_size, max_size)]


def get_ascending_vec_of_byte_vec_0x(
    rng: random.Random, n: int, min_size: int, max_size: int
) -> List[bytes]:
    """Return ``n`` byte strings, each filled with one value cycling through 1..15."""
    result = []
    element = 1
    for size in _sizes(rng, n, min_size, max_size):
        result.append(bytes([element]) * size)
        element += 1
        if element >= 16:
            element = 1
    return result


def get_ascending_vec_of_byte_vec_02x(
    rng: random.Random, n: int, min_size: int, max_size: int
) -> List[bytes]:
    """Return ``n`` byte strings, each filled with one value cycling through 1..255."""
    result = []
    element = 1
    for size in _sizes(rng, n, min_size, max_size):
        result.append(bytes([element]) * size)
        element = 1 if element == 255 else element + 1
    return result


def compare_unordered_byte_vecs(a: Sequence[bytes], b: Sequence[bytes]) -> bool:
    """Return whether ``a`` and ``b`` hold the same byte strings, in any order."""
    if len(a) != len(b):
        _log.debug("Vecs are different lengths")
        return False
    left = [bytes(x) for x in a]
    right = [bytes(y) for y in b]
    if left == right:
        return True
    missing = Counter(left) - Counter(right)
    if missing:
        _log.debug("Was not able to find values %r", list(missing))
        return False
    return True