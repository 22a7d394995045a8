"""Tests for the CombatBrain turn driver."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tactics.ai.brain import CombatBrain
from tactics.core.enums import ActionType, Domain, TileType
from tactics.core.models import GridPosition, Weapon

from tests.helpers.combat_arena import CombatArena

BOW = Weapon("shortbow", 1, 6, range=6, ranged=True)


def _arena_with(ally_pos, enemy_positions, ally_kw=None):
    arena = CombatArena()
    ally = arena.add_ally(1, pos=ally_pos, **(ally_kw or {}))
    enemies = [arena.add_enemy(10 + i, pos=p) for i, p in enumerate(enemy_positions)]
    arena.rng.script(Domain.INITIATIVE, 20, *([1] * len(enemies)))
    return arena, ally, enemies


class TestTargeting:
    def test_nearest_opponent(self):
        arena, ally, (far, near) = _arena_with((0, 0), [(9, 9), (3, 2)])
        enc = arena.start()
        assert CombatBrain().choose_target(enc, ally) is near

    def test_ties_go_to_lowest_id(self):
        arena, ally, (first, second) = _arena_with((4, 4), [(6, 4), (4, 6)])
        enc = arena.start()
        assert CombatBrain().choose_target(enc, ally) is first

    def test_no_target_when_opponents_gone(self):
        arena, ally, _ = _arena_with((0, 0), [(9, 9)])
        enc = arena.start()
        enc.end_combat()
        assert CombatBrain().choose_target(enc, ally) is None


class TestPlanning:
    def test_attacks_when_adjacent(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(1, 1)])
        enc = arena.start()
        proposal = CombatBrain().plan(enc, ally, has_moved=False, has_attacked=False)
        assert proposal.verb == ActionType.ATTACK
        assert proposal.target == enemy.id

    def test_melee_approach_stops_adjacent(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(3, 0)])
        enc = arena.start()
        assert CombatBrain().approach_cell(enc, ally, enemy) == GridPosition(2, 0)

    def test_approach_limited_by_movement(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(9, 0)], ally_kw={"base_movement": 4})
        enc = arena.start()
        assert CombatBrain().approach_cell(enc, ally, enemy) == GridPosition(4, 0)

    def test_archer_stops_at_range(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(9, 0)], ally_kw={"weapon": BOW})
        enc = arena.start()
        assert CombatBrain().approach_cell(enc, ally, enemy) == GridPosition(3, 0)

    def test_archer_without_line_of_sight_does_not_shoot(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(5, 0)], ally_kw={"weapon": BOW})
        arena.set_tile(2, 0, TileType.OBSTACLE)
        enc = arena.start()
        brain = CombatBrain()
        assert not brain.can_strike(enc, ally, enemy)
        assert brain.plan(enc, ally, False, False).verb == ActionType.MOVE

    def test_ends_turn_after_attacking(self):
        arena, ally, _ = _arena_with((0, 0), [(1, 0)])
        enc = arena.start()
        assert CombatBrain().plan(enc, ally, False, True).verb == ActionType.END_TURN

    def test_ends_turn_when_out_of_reach_after_moving(self):
        arena, ally, _ = _arena_with((0, 0), [(9, 9)])
        enc = arena.start()
        assert CombatBrain().plan(enc, ally, True, False).verb == ActionType.END_TURN


class TestTakeTurn:
    def test_adjacent_turn_is_attack_then_end(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(1, 0)])
        enc = arena.start()
        taken = CombatBrain().take_turn(enc, ally)
        assert [p.verb for p, _ in taken] == [ActionType.ATTACK, ActionType.END_TURN]
        assert enc.current_actor is enemy

    def test_distant_turn_moves_then_ends(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(9, 9)])
        enc = arena.start()
        taken = CombatBrain().take_turn(enc, ally)
        assert [p.verb for p, _ in taken] == [ActionType.MOVE, ActionType.END_TURN]
        assert all(ok for _, ok in taken)
        assert ally.position.manhattan(GridPosition(0, 0)) == 5

    def test_approach_then_attack(self):
        arena, ally, (enemy,) = _arena_with((0, 0), [(3, 0)])
        enc = arena.start()
        taken = CombatBrain().take_turn(enc, ally)
        assert [p.verb for p, _ in taken] == [ActionType.MOVE, ActionType.ATTACK, ActionType.END_TURN]
        assert ally.position == GridPosition(2, 0)
