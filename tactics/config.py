"""Combat configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CombatConfig:
    """Immutable configuration for an encounter."""

    # Randomness
    seed: int = 42

    # Battlefield
    grid_width: int = 12
    grid_height: int = 12

    # Attacks
    melee_range: int = 1
    default_ranged_range: int = 6          # Used by ranged weapons that declare no range
    base_armor_class: int = 10
    critical_roll: int = 20                # Natural roll that always hits and doubles dice
    fumble_roll: int = 1                   # Natural roll that always misses
    unarmed_min_damage: int = 1
    unarmed_max_damage: int = 3

    # Cover
    cover_ac_bonus: int = 2
    cover_adjacency: int = 1               # Obstacles this close to the defender give cover instead of blocking

    # Auto-play
    max_rounds: int = 100

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"
