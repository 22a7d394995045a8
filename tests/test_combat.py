"""Tests for attack resolution: to-hit, critical/fumble, damage, range and cover."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tactics.actions.combat import AttackResolver
from tactics.config import CombatConfig
from tactics.core.enums import Domain, Faction, TileType
from tactics.core.grid import CombatGrid
from tactics.core.models import Armor, GridPosition, Weapon

from tests.helpers.combat_arena import ScriptedRNG, make_combatant

BOW = Weapon("shortbow", 1, 6, range=6, ranged=True)
SLING = Weapon("sling", 1, 4, range=0, ranged=True)


def _setup(config: CombatConfig | None = None):
    cfg = config or CombatConfig()
    rng = ScriptedRNG(cfg.seed)
    return AttackResolver(cfg, rng), rng, CombatGrid(10, 10)


def _pair(attacker_pos=(0, 0), defender_pos=(1, 0), attacker_kw=None, defender_kw=None):
    a = make_combatant(1, position=GridPosition(*attacker_pos), **(attacker_kw or {}))
    d = make_combatant(2, faction=Faction.ENEMY, position=GridPosition(*defender_pos), **(defender_kw or {}))
    return a, d


# ---------------------------------------------------------------------------
# To-hit
# ---------------------------------------------------------------------------

class TestToHit:
    def test_natural_twenty_always_hits(self):
        res, rng, grid = _setup()
        a, d = _pair(defender_kw={"dexterity": 30, "armor": Armor("plate", 5, 2)})
        rng.script(Domain.TO_HIT, 20)
        rng.script(Domain.DAMAGE, 2)
        r = res.resolve(a, d, grid)
        assert r.target_ac == 25
        assert r.hit and r.critical
        # 2 doubled to 4, +0 STR, -2 DR
        assert r.damage == 2

    def test_natural_one_always_misses(self):
        res, rng, grid = _setup()
        a, d = _pair(attacker_kw={"strength": 30})
        rng.script(Domain.TO_HIT, 1)
        r = res.resolve(a, d, grid)
        assert r.attack_total == 11
        assert not r.hit
        assert r.damage == 0

    def test_meeting_ac_hits(self):
        res, rng, grid = _setup()
        a, d = _pair(attacker_kw={"strength": 14})
        rng.script(Domain.TO_HIT, 8, 7)
        assert res.resolve(a, d, grid).hit        # 8 + 2 = 10 vs AC 10
        assert not res.resolve(a, d, grid).hit    # 7 + 2 = 9

    def test_armor_class_components(self):
        res, _, _ = _setup()
        d = make_combatant(2, dexterity=14, armor=Armor("chainmail", 3, 1))
        assert res.armor_class(d) == 10 + 2 + 3
        assert res.armor_class(d, cover_bonus=2) == 17

    def test_attack_bonus_includes_accuracy_and_skill(self):
        res, _, _ = _setup()
        sword = Weapon("longsword", 1, 8, accuracy_bonus=1)
        a = make_combatant(1, strength=16, weapon=sword, skills={"Melee_Weapons": 2})
        assert res.attack_bonus(a) == 3 + 1 + 2

    def test_ranged_attack_uses_dexterity(self):
        res, _, _ = _setup()
        a = make_combatant(1, strength=8, dexterity=16, weapon=BOW, skills={"archery": 1})
        assert res.attack_bonus(a) == 3 + 0 + 1

    def test_unarmed_bonus_uses_unarmed_skill(self):
        res, _, _ = _setup()
        assert res.attack_bonus(make_combatant(1, strength=12)) == 1
        brawler = make_combatant(1, strength=12, skills={"unarmed": 2, "melee_weapons": 5})
        assert res.attack_bonus(brawler) == 1 + 2

    def test_unarmed_skill_reaches_the_roll(self):
        res, rng, grid = _setup()
        a, d = _pair(attacker_kw={"skills": {"unarmed": 3}})
        rng.script(Domain.TO_HIT, 7)
        rng.script(Domain.DAMAGE, 1)
        result = res.resolve(a, d, grid)
        assert result.attack_total == 7 + 3
        assert result.hit

    def test_configurable_critical_threshold(self):
        res, rng, grid = _setup(CombatConfig(critical_roll=19))
        a, d = _pair(defender_kw={"dexterity": 30})
        rng.script(Domain.TO_HIT, 19)
        assert res.resolve(a, d, grid).critical


# ---------------------------------------------------------------------------
# Damage
# ---------------------------------------------------------------------------

class TestDamage:
    def test_weapon_dice_plus_modifier_minus_reduction(self):
        res, rng, grid = _setup()
        a, d = _pair(
            attacker_kw={"strength": 14, "weapon": Weapon("axe", 1, 12)},
            defender_kw={"armor": Armor("chainmail", 3, 1)},
        )
        rng.script(Domain.TO_HIT, 15)
        rng.script(Domain.DAMAGE, 7)
        r = res.resolve(a, d, grid)
        assert r.hit and not r.critical
        assert r.damage == 7 + 2 - 1

    def test_damage_never_negative(self):
        res, rng, grid = _setup()
        a, d = _pair(attacker_kw={"strength": 1}, defender_kw={"armor": Armor("plate", 0, 2)})
        rng.script(Domain.TO_HIT, 20)
        rng.script(Domain.DAMAGE, 1)
        r = res.resolve(a, d, grid)
        assert r.hit
        assert r.damage == 0

    def test_unarmed_damage_range(self):
        res, _, grid = _setup()
        a, d = _pair(defender_kw={"max_hp": 500})
        for _ in range(50):
            dmg = res.roll_damage(a, d, critical=False)
            assert 1 <= dmg <= 3

    def test_rolls_draw_from_their_own_domains(self):
        res, rng, grid = _setup()
        a, d = _pair()
        rng.script(Domain.TO_HIT, 20)
        res.resolve(a, d, grid)
        assert rng.draws(Domain.INITIATIVE) == 0
        assert rng.draws(Domain.DAMAGE) == 1


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------

class TestRange:
    def test_melee_out_of_range_rejected_without_rolling(self):
        res, rng, grid = _setup()
        a, d = _pair(defender_pos=(2, 0))
        r = res.resolve(a, d, grid)
        assert not r.valid
        assert r.rejected == "out of range"
        assert rng.draws(Domain.TO_HIT) == 0

    def test_melee_reaches_diagonal(self):
        res, _, _ = _setup()
        a, d = _pair(defender_pos=(1, 1))
        assert res.in_range(a, d)

    def test_range_check_can_be_skipped(self):
        res, rng, grid = _setup()
        a, d = _pair(defender_pos=(5, 5))
        rng.script(Domain.TO_HIT, 20)
        assert res.resolve(a, d, grid, check_range=False).valid

    def test_ranged_weapon_range(self):
        res, _, _ = _setup()
        a, d = _pair(defender_pos=(6, 3), attacker_kw={"weapon": BOW})
        assert res.attack_range(a) == 6
        assert res.in_range(a, d)
        d.position = GridPosition(7, 0)
        assert not res.in_range(a, d)

    def test_ranged_weapon_without_range_uses_default(self):
        res, _, _ = _setup(CombatConfig(default_ranged_range=4))
        a = make_combatant(1, weapon=SLING)
        assert res.attack_range(a) == 4


# ---------------------------------------------------------------------------
# Cover and line of sight
# ---------------------------------------------------------------------------

class TestCover:
    def test_clear_line(self):
        res, _, grid = _setup()
        cover = res.evaluate_cover(grid, GridPosition(0, 0), GridPosition(5, 0))
        assert not cover.blocked and cover.cover_bonus == 0

    def test_obstacle_next_to_target_gives_cover(self):
        res, rng, grid = _setup()
        grid.set_tile(GridPosition(4, 0), TileType.OBSTACLE)
        a, d = _pair(defender_pos=(5, 0), attacker_kw={"weapon": BOW})
        rng.script(Domain.TO_HIT, 11)
        r = res.resolve(a, d, grid)
        assert r.cover_bonus == 2
        assert r.target_ac == 12
        assert not r.hit

    def test_distant_obstacle_blocks(self):
        res, rng, grid = _setup()
        grid.set_tile(GridPosition(2, 0), TileType.OBSTACLE)
        a, d = _pair(defender_pos=(5, 0), attacker_kw={"weapon": BOW})
        r = res.resolve(a, d, grid)
        assert r.rejected == "no line of sight"
        assert rng.draws(Domain.TO_HIT) == 0

    def test_block_wins_over_cover(self):
        res, _, grid = _setup()
        grid.set_tile(GridPosition(2, 0), TileType.OBSTACLE)
        grid.set_tile(GridPosition(4, 0), TileType.OBSTACLE)
        assert res.evaluate_cover(grid, GridPosition(0, 0), GridPosition(5, 0)).blocked

    def test_difficult_terrain_does_not_block(self):
        res, _, grid = _setup()
        grid.set_tile(GridPosition(2, 0), TileType.DIFFICULT)
        assert not res.evaluate_cover(grid, GridPosition(0, 0), GridPosition(5, 0)).blocked

    def test_melee_ignores_cover(self):
        res, rng, grid = _setup()
        grid.set_tile(GridPosition(0, 1), TileType.OBSTACLE)
        a, d = _pair(defender_pos=(1, 1))
        rng.script(Domain.TO_HIT, 10)
        r = res.resolve(a, d, grid)
        assert r.cover_bonus == 0
        assert r.hit

    @pytest.mark.parametrize("adjacency,blocked", [(1, True), (3, False)])
    def test_cover_adjacency_is_configurable(self, adjacency, blocked):
        res, _, grid = _setup(CombatConfig(cover_adjacency=adjacency))
        grid.set_tile(GridPosition(2, 0), TileType.OBSTACLE)
        cover = res.evaluate_cover(grid, GridPosition(0, 0), GridPosition(5, 0))
        assert cover.blocked is blocked
