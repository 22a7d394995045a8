"""Engine systems: the encounter's seeded RNG."""

from tactics.systems.rng import EncounterRNG

__all__ = ["EncounterRNG"]
