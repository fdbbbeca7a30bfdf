import logging
import random
import secrets
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


class RandomSource:
    """
    Uniform integer and float draws for one machine session.

    Not safe for concurrent use: every session should own its own instance.
    """

    def __init__(self, generator: random.Random):
        self._generator = generator

    @classmethod
    def seeded(cls, seed: int) -> 'RandomSource':
        return cls(random.Random(seed))

    @classmethod
    def system(cls) -> 'RandomSource':
        return cls(secrets.SystemRandom())

    @classmethod
    def from_settings(cls, seed: Optional[int] = None) -> 'RandomSource':
        """Seeded generator when a seed is given or configured, SystemRandom otherwise."""
        if seed is None:
            from bandit_engine.config import Config
            seed = Config.RNG_SEED
        if seed is not None:
            logger.debug(f"Creating seeded random source (seed={seed})")
            return cls.seeded(seed)
        return cls.system()

    def next_int(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError(f"next_int bound must be positive, got {n}")
        return self._generator.randrange(n)

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        return self._generator.random()


class SequenceOverride:
    """
    Pre-selected symbols handed out before any weighted draw.

    Used to make reel outcomes reproducible in tests and debugging. Once the
    sequence is exhausted, draws fall back to the random source.
    """

    def __init__(self, sequence: Sequence[int]):
        self._sequence = tuple(sequence)
        self._cursor = 0

    def has_next(self) -> bool:
        return self._cursor < len(self._sequence)

    def take(self) -> int:
        if not self.has_next():
            raise IndexError("Symbol override sequence is exhausted")
        value = self._sequence[self._cursor]
        self._cursor += 1
        return value

    @property
    def values(self):
        return self._sequence

    @property
    def remaining(self) -> int:
        return len(self._sequence) - self._cursor

    def reset(self):
        self._cursor = 0

    def __repr__(self):
        return f"<SequenceOverride {list(self._sequence)} cursor={self._cursor}>"
