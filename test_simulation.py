#!/usr/bin/env python3
"""
Simulation Tests
=================
Drives advance() directly on plain GameState objects; no terminal.
"""

import unittest

from river_raid.components import Kind, Position
from river_raid.config import GameConfig
from river_raid.entities import create_enemy, create_missile
from river_raid.input import Command
from river_raid.simulation import new_game, advance, Phase


def open_water(**overrides):
    """Config with no banks and no automatic spawns."""
    settings = dict(width=10, height=20, scene_design=None, spawn_interval=1000.0)
    settings.update(overrides)
    return GameConfig(**settings)


def player_column(state):
    return int(state.player_position().x)


def positions(state, kind):
    return [
        (pos.x, pos.y)
        for entity_id in state.world.of_kind(kind)
        for pos in [state.world.get_component(entity_id, Position)]
    ]


class TestNewGame(unittest.TestCase):

    def test_player_starts_centered_on_bottom_row(self):
        state = new_game(open_water())
        pos = state.player_position()
        self.assertEqual(pos.x, 5)
        self.assertEqual(pos.y, 19)
        self.assertEqual(state.phase, Phase.RUNNING)
        self.assertTrue(state.running)

    def test_single_player_and_empty_containers(self):
        state = new_game(open_water())
        self.assertEqual(state.count(Kind.PLAYER), 1)
        self.assertEqual(state.count(Kind.MISSILE), 0)
        self.assertEqual(state.count(Kind.ENEMY), 0)


class TestMovement(unittest.TestCase):

    def test_move_right_clamps_at_right_edge(self):
        """Column 5 of width 10, six MoveRight ticks: ends at 9, not 11."""
        state = new_game(open_water())
        self.assertEqual(player_column(state), 5)
        for _ in range(6):
            state = advance(state, [Command.MOVE_RIGHT], 0.05)
        self.assertEqual(player_column(state), 9)

    def test_move_left_clamps_at_left_edge(self):
        state = new_game(open_water())
        for _ in range(20):
            state = advance(state, [Command.MOVE_LEFT], 0.05)
        self.assertEqual(player_column(state), 0)

    def test_mixed_moves_never_leave_play_area(self):
        state = new_game(open_water(width=4))
        pattern = [Command.MOVE_LEFT] * 7 + [Command.MOVE_RIGHT] * 11 + [Command.MOVE_LEFT] * 2
        for command in pattern:
            state = advance(state, [command, command], 0.05)
            self.assertGreaterEqual(player_column(state), 0)
            self.assertLessEqual(player_column(state), 3)

    def test_several_moves_in_one_tick(self):
        state = new_game(open_water())
        state = advance(state, [Command.MOVE_LEFT] * 3, 0.05)
        self.assertEqual(player_column(state), 2)


class TestFiring(unittest.TestCase):

    def test_fire_creates_one_missile_at_player_column(self):
        state = new_game(open_water())
        state = advance(state, [Command.MOVE_LEFT, Command.FIRE], 0.0)
        missiles = positions(state, Kind.MISSILE)
        self.assertEqual(len(missiles), 1)
        self.assertEqual(missiles[0][0], 4)
        self.assertLess(missiles[0][1], state.player_position().y)

    def test_fire_during_cooldown_is_ignored(self):
        state = new_game(open_water(fire_cooldown=0.25))
        state = advance(state, [Command.FIRE, Command.FIRE], 0.125)
        self.assertEqual(state.count(Kind.MISSILE), 1)

        state = advance(state, [Command.FIRE], 0.125)
        self.assertEqual(state.count(Kind.MISSILE), 1)

        state = advance(state, [Command.FIRE], 0.125)
        self.assertEqual(state.count(Kind.MISSILE), 2)

    def test_zero_cooldown_allows_fire_every_tick(self):
        state = new_game(open_water(fire_cooldown=0.0))
        for _ in range(3):
            state = advance(state, [Command.FIRE], 0.01)
        self.assertEqual(state.count(Kind.MISSILE), 3)

    def test_missile_flies_up_and_leaves_play_area(self):
        state = new_game(open_water(missile_speed=10.0))
        state = advance(state, [Command.FIRE], 0.5)
        (_, y), = positions(state, Kind.MISSILE)
        self.assertAlmostEqual(y, 13.0)

        state = advance(state, [], 2.0)
        self.assertEqual(state.count(Kind.MISSILE), 0)
        self.assertEqual(state.world.pending_removals(), 0)


class TestCollisions(unittest.TestCase):

    def test_missile_and_enemy_destroy_each_other(self):
        state = new_game(open_water())
        create_enemy(state.world, 3.0, 5.0, 6.0)
        create_missile(state.world, 3.0, 5.0, 30.0, state.player_id)

        state = advance(state, [], 0.01)

        self.assertEqual(state.count(Kind.ENEMY), 0)
        self.assertEqual(state.count(Kind.MISSILE), 0)
        self.assertEqual(state.score, 1)

    def test_fast_missile_cannot_skip_enemy(self):
        state = new_game(open_water())
        create_enemy(state.world, 3.0, 5.0, 0.0)
        create_missile(state.world, 3.0, 12.0, 30.0, state.player_id)

        # Moves 15 rows in one tick, passing straight through row 5
        state = advance(state, [], 0.5)

        self.assertEqual(state.count(Kind.ENEMY), 0)
        self.assertEqual(state.count(Kind.MISSILE), 0)

    def test_missile_in_other_column_misses(self):
        state = new_game(open_water())
        create_enemy(state.world, 3.0, 5.0, 0.0)
        create_missile(state.world, 4.0, 5.0, 30.0, state.player_id)

        state = advance(state, [], 0.01)

        self.assertEqual(state.count(Kind.ENEMY), 1)
        self.assertEqual(state.count(Kind.MISSILE), 1)
        self.assertEqual(state.score, 0)

    def test_several_missiles_on_one_enemy_score_once(self):
        state = new_game(open_water())
        create_enemy(state.world, 3.0, 5.0, 0.0)
        for y in (5.0, 5.3, 5.6):
            create_missile(state.world, 3.0, y, 1.0, state.player_id)

        state = advance(state, [], 0.01)

        self.assertEqual(state.count(Kind.ENEMY), 0)
        self.assertEqual(state.count(Kind.MISSILE), 0)
        self.assertEqual(state.score, 1)

    def test_missile_overlapping_two_enemies_destroys_both(self):
        state = new_game(open_water())
        create_enemy(state.world, 3.0, 5.0, 0.0)
        create_enemy(state.world, 3.0, 5.5, 0.0)
        create_missile(state.world, 3.0, 5.2, 1.0, state.player_id)

        state = advance(state, [], 0.01)

        self.assertEqual(state.count(Kind.ENEMY), 0)
        self.assertEqual(state.count(Kind.MISSILE), 0)
        self.assertEqual(state.score, 2)

    def test_enemy_hitting_player_ends_game(self):
        state = new_game(open_water())
        create_enemy(state.world, 5.0, 18.0, 6.0)
        bystander = create_enemy(state.world, 1.0, 2.0, 6.0)

        state = advance(state, [], 0.2)

        self.assertEqual(state.phase, Phase.GAME_OVER)
        self.assertIsNone(state.player_position())
        self.assertEqual(state.crash_site, (5, 19))
        frozen_y = state.world.get_component(bystander, Position).y

        for _ in range(5):
            state = advance(state, [Command.MOVE_LEFT, Command.FIRE], 0.2)

        self.assertEqual(state.phase, Phase.GAME_OVER)
        self.assertEqual(state.world.get_component(bystander, Position).y, frozen_y)
        self.assertEqual(state.count(Kind.MISSILE), 0)

    def test_enemy_leaving_bottom_is_removed(self):
        state = new_game(open_water())
        create_enemy(state.world, 0.0, 19.0, 6.0)
        state = advance(state, [], 0.5)
        self.assertEqual(state.count(Kind.ENEMY), 0)
        self.assertEqual(state.phase, Phase.RUNNING)


class TestTerrainCrash(unittest.TestCase):

    def test_flying_onto_the_bank_ends_game(self):
        # Columns 0-5 river, 6-9 land
        config = open_water(scene_design=((0, 60, 0, 0, 40, 10),))
        state = new_game(config)
        state = advance(state, [], 0.05)
        self.assertEqual(state.phase, Phase.RUNNING)

        state = advance(state, [Command.MOVE_RIGHT], 0.05)
        self.assertEqual(state.phase, Phase.GAME_OVER)
        self.assertEqual(state.crash_site, (6, 19))


class TestSpawning(unittest.TestCase):

    def test_enemies_spawn_on_interval(self):
        state = new_game(open_water(spawn_interval=0.5), seed=7)
        state = advance(state, [], 0.25)
        self.assertEqual(state.count(Kind.ENEMY), 0)
        state = advance(state, [], 0.25)
        self.assertEqual(state.count(Kind.ENEMY), 1)
        state = advance(state, [], 1.0)
        self.assertEqual(state.count(Kind.ENEMY), 3)

    def test_spawned_enemy_is_on_top_row_in_play_area(self):
        state = new_game(open_water(spawn_interval=0.1, enemy_speed=0.0), seed=1)
        state = advance(state, [], 0.1)
        (x, y), = positions(state, Kind.ENEMY)
        self.assertEqual(y, 0.0)
        self.assertTrue(0 <= x < 10)

    def test_spawns_only_on_river(self):
        # Columns 0-4 land, 5-9 river; second section allows enemies
        design = ((50, 50, 0, 0, 0, 1), (50, 50, 0, 0, 0, 30))
        config = open_water(scene_design=design, spawn_interval=0.1,
                            enemy_speed=0.0, scroll_speed=0.0, height=5)
        state = new_game(config, seed=3)
        for _ in range(10):
            state = advance(state, [], 0.1)
        columns = [x for x, _ in positions(state, Kind.ENEMY)]
        self.assertTrue(columns)
        self.assertTrue(all(x >= 5 for x in columns))

    def test_same_seed_same_game(self):
        config = open_water(spawn_interval=0.1)
        a = new_game(config, seed=42)
        b = new_game(config, seed=42)
        for _ in range(8):
            a = advance(a, [], 0.1)
            b = advance(b, [], 0.1)
        self.assertEqual(positions(a, Kind.ENEMY), positions(b, Kind.ENEMY))


class TestPause(unittest.TestCase):

    def test_no_time_passes_while_paused(self):
        state = new_game(open_water(spawn_interval=0.1))
        state = advance(state, [], 0.1)
        clock_before = state.clock
        enemies_before = positions(state, Kind.ENEMY)

        state = advance(state, [Command.TOGGLE_PAUSE], 0.1)
        self.assertEqual(state.phase, Phase.PAUSED)
        for _ in range(5):
            state = advance(state, [Command.MOVE_LEFT, Command.FIRE], 0.1)

        self.assertEqual(state.clock, clock_before)
        self.assertEqual(positions(state, Kind.ENEMY), enemies_before)
        self.assertEqual(state.count(Kind.MISSILE), 0)
        self.assertEqual(player_column(state), 5)

        state = advance(state, [Command.TOGGLE_PAUSE], 0.0)
        self.assertEqual(state.phase, Phase.RUNNING)
        self.assertEqual(state.clock, clock_before)

    def test_quit_while_paused(self):
        state = new_game(open_water())
        state = advance(state, [Command.TOGGLE_PAUSE, Command.QUIT], 0.1)
        self.assertFalse(state.running)


class TestResetAndPurity(unittest.TestCase):

    def test_reset_after_game_over(self):
        state = new_game(open_water())
        create_enemy(state.world, 5.0, 19.0, 0.0)
        create_enemy(state.world, 2.0, 3.0, 0.0)
        state = advance(state, [], 0.1)
        self.assertEqual(state.phase, Phase.GAME_OVER)

        state = advance(state, [Command.RESET], 0.0)

        self.assertEqual(state.phase, Phase.RUNNING)
        self.assertEqual(state.count(Kind.ENEMY), 0)
        self.assertEqual(state.count(Kind.PLAYER), 1)
        self.assertEqual(state.score, 0)
        self.assertIsNone(state.crash_site)

    def test_reset_ignored_while_running(self):
        state = new_game(open_water())
        state = advance(state, [Command.MOVE_LEFT], 0.1)
        state = advance(state, [Command.RESET], 0.1)
        self.assertEqual(player_column(state), 4)

    def test_advance_does_not_mutate_input(self):
        state = new_game(open_water(spawn_interval=0.1))
        create_enemy(state.world, 3.0, 3.0, 6.0)
        before_enemies = positions(state, Kind.ENEMY)

        nxt = advance(state, [Command.MOVE_RIGHT, Command.FIRE], 0.1)

        self.assertEqual(player_column(state), 5)
        self.assertEqual(state.clock, 0.0)
        self.assertEqual(state.count(Kind.MISSILE), 0)
        self.assertEqual(positions(state, Kind.ENEMY), before_enemies)
        self.assertEqual(player_column(nxt), 6)
        self.assertIsNot(nxt.world, state.world)


if __name__ == '__main__':
    unittest.main()
