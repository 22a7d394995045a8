"""Domain-separated deterministic RNG using xxhash.

Every random draw in an encounter comes from one ``EncounterRNG``.  A draw
is a pure function of (seed, domain, draw index within that domain), so two
encounters built with the same seed and fed the same calls replay exactly,
and extra draws in one domain never shift another domain's sequence.

Formula: RNG_Value = Hash(Seed, Domain, DrawIndex)
"""

from __future__ import annotations

import struct

import xxhash

from tactics.core.enums import Domain


class EncounterRNG:
    """Seeded pseudo-random source with one draw counter per domain.

    Any integer seed is accepted; it is hashed modulo 2**64.
    """

    __slots__ = ("_seed", "_draws")

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._draws: dict[Domain, int] = {}

    @property
    def seed(self) -> int:
        return self._seed

    def draws(self, domain: Domain) -> int:
        """How many values *domain* has consumed so far."""
        return self._draws.get(domain, 0)

    def _hash(self, domain: Domain) -> int:
        index = self._draws.get(domain, 0)
        self._draws[domain] = index + 1
        payload = struct.pack("<QiQ", self._seed & self._MAX_UINT64, domain.value, index)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        f = self.next_float(domain)
        return low + int(f * (high - low + 1))

    def roll(self, domain: Domain, sides: int = 20) -> int:
        """Roll a single die with *sides* faces."""
        return self.next_int(domain, 1, sides)
