import unittest
from dataclasses import replace
from typing import List, Optional, Sequence

from absl.testing import absltest, parameterized

from arena.game.engine.battle_setup import create_initial_battle_state
from arena.game.engine.engine_fixtures import (
    ScriptedRandom,
    fixture_game_data,
    make_creature,
)
from arena.game.engine.rng import SeededRandom
from arena.game.engine.turn_engine import (
    TurnEngine,
    default_action,
    forfeit_battle,
)
from arena.game.interface.battle_action import PlayerAction
from arena.game.schema.battle_state import BattleState
from arena.game.schema.creature_state import CreatureInstance
from arena.game.schema.enums import BattlePhase, BattleResult, EventType, Status


def _state(
    side1: Sequence[CreatureInstance], side2: Sequence[CreatureInstance], seed: int = 7
) -> BattleState:
    return create_initial_battle_state("test-battle", seed, "alice", "bob", side1, side2)


def _types(state: BattleState) -> List[EventType]:
    return [event.type for event in state.last_turn_events]


def _events_of(state: BattleState, event_type: EventType):
    return [event for event in state.last_turn_events if event.type == event_type]


class TurnEngineTestBase(parameterized.TestCase):
    def setUp(self) -> None:
        self.game_data = fixture_game_data()
        self.engine = TurnEngine(self.game_data)

    def _scripted_engine(
        self, values: Sequence[float] = (), default: Optional[float] = None
    ) -> TurnEngine:
        self.rng = ScriptedRandom(values, default)
        return TurnEngine(self.game_data, rng_factory=lambda seed: self.rng)


class TurnBasicsTest(TurnEngineTestBase):
    def test_same_inputs_same_result(self) -> None:
        state = _state(
            [make_creature("a1", moves=("tackle", "slam"))],
            [make_creature("b1", definition_id="pyro", moves=("ember",))],
        )
        first = self.engine.simulate_turn(
            state, PlayerAction.use_move("slam"), PlayerAction.use_move("ember"), 99
        )
        second = self.engine.simulate_turn(
            state, PlayerAction.use_move("slam"), PlayerAction.use_move("ember"), 99
        )
        self.assertEqual(first.to_dict(), second.to_dict())
        self.assertEqual(first.digest(), second.digest())

    def test_seed_defaults_to_battle_seed(self) -> None:
        state = _state([make_creature("a1")], [make_creature("b1")], seed=1234)
        implicit = self.engine.simulate_turn(
            state, PlayerAction.use_move("tackle"), PlayerAction.use_move("tackle")
        )
        explicit = self.engine.simulate_turn(
            state, PlayerAction.use_move("tackle"), PlayerAction.use_move("tackle"), 1234
        )
        self.assertEqual(implicit.digest(), explicit.digest())

    def test_turn_bookends(self) -> None:
        state = _state([make_creature("a1")], [make_creature("b1")])
        next_state = self.engine.simulate_turn(state, None, None)
        self.assertEqual(next_state.turn_number, 1)
        self.assertEqual(_types(next_state), [EventType.TURN_START, EventType.TURN_END])
        self.assertTrue(all(e.turn == 1 for e in next_state.last_turn_events))
        self.assertEqual(next_state.phase, BattlePhase.AWAITING_ACTIONS)
        self.assertEqual(next_state.result, BattleResult.ONGOING)

    def test_input_state_untouched(self) -> None:
        state = _state([make_creature("a1")], [make_creature("b1")])
        before = state.to_dict()
        self.engine.simulate_turn(
            state, PlayerAction.use_move("tackle"), PlayerAction.use_move("tackle")
        )
        self.assertEqual(state.to_dict(), before)

    def test_finished_battle_is_returned_unchanged(self) -> None:
        state = replace(
            _state([make_creature("a1")], [make_creature("b1")]),
            phase=BattlePhase.FINISHED,
            result=BattleResult.SIDE1_WIN,
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("tackle"), PlayerAction.use_move("tackle")
        )
        self.assertIs(next_state, state)

    def test_hp_stays_in_bounds(self) -> None:
        for seed in range(20):
            state = _state(
                [
                    make_creature("a1", definition_id="pyro", moves=("ember", "fire_blast")),
                    make_creature("a2", moves=("slam", "quick_strike")),
                ],
                [
                    make_creature("b1", definition_id="leafy", hp=60),
                    make_creature("b2", definition_id="volt", moves=("zap", "thunder_wave")),
                ],
                seed=seed,
            )
            for _ in range(30):
                if state.is_finished():
                    break
                state = self.engine.simulate_turn(
                    state, default_action(state, 1), default_action(state, 2)
                )
                state.validate()
                for side in (state.player1, state.player2):
                    for creature in side.all_creatures():
                        self.assertGreaterEqual(creature.current_hp, 0)
                        self.assertLessEqual(creature.current_hp, creature.max_hp)


class TurnOrderTest(TurnEngineTestBase):
    def _first_mover(self, state: BattleState) -> int:
        return _events_of(state, EventType.MOVE_USED)[0].source_player

    def test_faster_creature_moves_first(self) -> None:
        for seed in range(50):
            state = _state(
                [make_creature("a1", spd=30, hp=500)],
                [make_creature("b1", spd=150, hp=500)],
                seed=seed,
            )
            next_state = self.engine.simulate_turn(
                state, PlayerAction.use_move("tackle"), PlayerAction.use_move("tackle")
            )
            self.assertEqual(self._first_mover(next_state), 2)

    def test_priority_beats_speed(self) -> None:
        state = _state(
            [make_creature("a1", spd=30, moves=("quick_strike",))],
            [make_creature("b1", spd=150)],
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("quick_strike"), PlayerAction.use_move("tackle")
        )
        self.assertEqual(self._first_mover(next_state), 1)

    def test_switch_goes_before_priority_move(self) -> None:
        state = _state(
            [make_creature("a1", spd=10), make_creature("a2", hp=300)],
            [make_creature("b1", spd=150, moves=("quick_strike",))],
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.switch("a2"), PlayerAction.use_move("quick_strike")
        )
        types = _types(next_state)
        self.assertLess(types.index(EventType.SWITCH), types.index(EventType.MOVE_USED))
        self.assertEqual(next_state.player1.active.instance_id, "a2")
        self.assertEqual(
            [c.instance_id for c in next_state.player1.bench], ["a1"]
        )
        self.assertEqual(
            _events_of(next_state, EventType.DAMAGE)[0].target_id, "a2"
        )
        self.assertEqual(next_state.player1.find_creature("a1").current_hp, 100)

    @parameterized.named_parameters(("side1_wins_flip", 0.1, 1), ("side2_wins_flip", 0.9, 2))
    def test_full_tie_uses_one_draw(self, flip: float, first: int) -> None:
        engine = self._scripted_engine([flip], default=0.99)
        state = _state([make_creature("a1", hp=500)], [make_creature("b1", hp=500)])
        next_state = engine.simulate_turn(
            state, PlayerAction.use_move("tackle"), PlayerAction.use_move("tackle")
        )
        self.assertEqual(self._first_mover(next_state), first)
        # tie flip, then hit, crit and variance for each tackle
        self.assertEqual(self.rng.draws, 7)

    def test_paralysis_slows_turn_order(self) -> None:
        state = _state(
            [make_creature("a1", spd=100, hp=500, status=Status.PARALYSIS, status_turns=3)],
            [make_creature("b1", spd=60, hp=500)],
        )
        engine = self._scripted_engine(default=0.99)
        next_state = engine.simulate_turn(
            state, PlayerAction.use_move("tackle"), PlayerAction.use_move("tackle")
        )
        self.assertEqual(self._first_mover(next_state), 2)


class InvalidActionTest(TurnEngineTestBase):
    @parameterized.named_parameters(
        ("unknown_move", PlayerAction.use_move("hyper_beam"), None),
        ("move_not_known", PlayerAction.use_move("slam"), None),
        ("move_on_cooldown", PlayerAction.use_move("tackle"), {"tackle": 1}),
        ("switch_to_missing", PlayerAction.switch("ghost"), None),
        ("switch_to_active", PlayerAction.switch("a1"), None),
    )
    def test_invalid_action_is_skipped(self, action, cooldowns) -> None:
        engine = self._scripted_engine()
        state = _state(
            [make_creature("a1", cooldowns=cooldowns), make_creature("a2")],
            [make_creature("b1")],
        )
        next_state = engine.simulate_turn(state, action, None)
        invalid = _events_of(next_state, EventType.INVALID_ACTION)
        self.assertLen(invalid, 1)
        self.assertEqual(invalid[0].source_player, 1)
        self.assertEqual(invalid[0].payload["action"], action.to_dict())
        self.assertEmpty(_events_of(next_state, EventType.MOVE_USED))
        self.assertEmpty(_events_of(next_state, EventType.SWITCH))
        self.assertEqual(next_state.player1.active.instance_id, "a1")
        self.assertEqual(next_state.turn_number, 1)
        self.assertEqual(self.rng.draws, 0)

    def test_other_side_still_acts(self) -> None:
        state = _state([make_creature("a1")], [make_creature("b1")])
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("hyper_beam"), PlayerAction.use_move("tackle")
        )
        used = _events_of(next_state, EventType.MOVE_USED)
        self.assertLen(used, 1)
        self.assertEqual(used[0].source_player, 2)
        self.assertLess(next_state.player1.active.current_hp, 100)


class DamageFlowTest(TurnEngineTestBase):
    def test_damage_event_payload(self) -> None:
        engine = self._scripted_engine([0.0, 0.99, 0.999999])
        state = _state([make_creature("a1")], [make_creature("b1")])
        next_state = engine.simulate_turn(state, PlayerAction.use_move("tackle"), None)
        damage = _events_of(next_state, EventType.DAMAGE)[0]
        self.assertEqual(damage.actor_id, "a1")
        self.assertEqual(damage.target_id, "b1")
        self.assertEqual(damage.payload["damage"], 39)
        self.assertEqual(damage.payload["remaining"], 61)
        self.assertFalse(damage.payload["critical"])
        self.assertEqual(damage.payload["effectiveness"], 1.0)
        self.assertEqual(next_state.player2.active.current_hp, 61)
        self.assertEqual(self.rng.draws, 3)

    def test_zero_power_attack_deals_damage(self) -> None:
        state = _state(
            [make_creature("a1", moves=("feint",))], [make_creature("b1")]
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("feint"), None
        )
        damage = _events_of(next_state, EventType.DAMAGE)
        self.assertLen(damage, 1)
        self.assertEqual(damage[0].payload["damage"], 1)
        self.assertEqual(next_state.player2.active.current_hp, 99)

    def test_critical_hit(self) -> None:
        engine = self._scripted_engine([0.0, 0.0, 0.999999])
        state = _state([make_creature("a1")], [make_creature("b1")])
        next_state = engine.simulate_turn(state, PlayerAction.use_move("tackle"), None)
        types = _types(next_state)
        self.assertLess(types.index(EventType.CRITICAL), types.index(EventType.DAMAGE))
        self.assertTrue(_events_of(next_state, EventType.DAMAGE)[0].payload["critical"])

    def test_miss_consumes_only_the_hit_roll(self) -> None:
        engine = self._scripted_engine([0.99])
        state = _state(
            [make_creature("a1", moves=("slam",))], [make_creature("b1", spd=300)]
        )
        next_state = engine.simulate_turn(state, PlayerAction.use_move("slam"), None)
        self.assertLen(_events_of(next_state, EventType.MISS), 1)
        self.assertEmpty(_events_of(next_state, EventType.DAMAGE))
        self.assertEqual(next_state.player2.active.current_hp, 100)
        self.assertEqual(self.rng.draws, 1)

    def test_super_effective_with_status_roll(self) -> None:
        engine = self._scripted_engine(default=0.5)
        state = _state(
            [make_creature("a1", definition_id="pyro", moves=("ember",))],
            [make_creature("b1", definition_id="leafy", hp=500)],
        )
        next_state = engine.simulate_turn(state, PlayerAction.use_move("ember"), None)
        self.assertLen(_events_of(next_state, EventType.SUPER_EFFECTIVE), 1)
        self.assertEmpty(_events_of(next_state, EventType.STATUS_APPLIED))
        # hit, crit, variance, burn chance
        self.assertEqual(self.rng.draws, 4)

    def test_resisted_hit(self) -> None:
        state = _state(
            [make_creature("a1", definition_id="pyro", moves=("ember",))],
            [make_creature("b1", definition_id="pyro", hp=500)],
        )
        next_state = self.engine.simulate_turn(state, PlayerAction.use_move("ember"), None)
        self.assertLen(_events_of(next_state, EventType.NOT_EFFECTIVE), 1)

    def test_immune_damaging_move(self) -> None:
        engine = self._scripted_engine(default=0.5)
        state = _state(
            [make_creature("a1", definition_id="volt", moves=("zap",))],
            [make_creature("b1", definition_id="rock")],
        )
        next_state = engine.simulate_turn(state, PlayerAction.use_move("zap"), None)
        self.assertLen(_events_of(next_state, EventType.NO_EFFECT), 1)
        self.assertEmpty(_events_of(next_state, EventType.DAMAGE))
        self.assertEqual(next_state.player2.active.current_hp, 100)
        self.assertEqual(self.rng.draws, 3)

    def test_immune_status_move(self) -> None:
        engine = self._scripted_engine([0.1])
        state = _state(
            [make_creature("a1", definition_id="volt", moves=("thunder_wave",))],
            [make_creature("b1", definition_id="rock")],
        )
        next_state = engine.simulate_turn(
            state, PlayerAction.use_move("thunder_wave"), None
        )
        self.assertLen(_events_of(next_state, EventType.NO_EFFECT), 1)
        self.assertEqual(next_state.player2.active.status, Status.NONE)
        self.assertEqual(self.rng.draws, 1)


class FaintTest(TurnEngineTestBase):
    def test_faint_promotes_first_bench_creature(self) -> None:
        state = _state(
            [make_creature("a1", spd=200, moves=("mega_punch",))],
            [make_creature("b1", hp=10, max_hp=100), make_creature("b2"), make_creature("b3")],
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("mega_punch"), PlayerAction.use_move("tackle")
        )
        faint = _events_of(next_state, EventType.FAINT)
        self.assertLen(faint, 1)
        self.assertEqual(faint[0].target_id, "b1")
        switch = _events_of(next_state, EventType.SWITCH)[0]
        self.assertTrue(switch.payload["forced"])
        self.assertEqual(switch.target_id, "b2")
        self.assertEqual(next_state.player2.active.instance_id, "b2")
        self.assertEqual([c.instance_id for c in next_state.player2.bench], ["b3"])
        self.assertEqual([c.instance_id for c in next_state.player2.fallen], ["b1"])
        # the replacement does not inherit the fainted creature's action
        self.assertLen(_events_of(next_state, EventType.MOVE_USED), 1)
        self.assertEqual(next_state.player1.active.current_hp, 100)
        self.assertEqual(next_state.result, BattleResult.ONGOING)
        next_state.validate()

    def test_last_creature_fainting_ends_battle(self) -> None:
        state = _state(
            [make_creature("a1", spd=200, moves=("mega_punch",))],
            [make_creature("b1", hp=10, max_hp=100)],
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("mega_punch"), PlayerAction.use_move("tackle")
        )
        self.assertIsNone(next_state.player2.active)
        self.assertEqual(next_state.result, BattleResult.SIDE1_WIN)
        self.assertEqual(next_state.phase, BattlePhase.FINISHED)
        end = next_state.last_turn_events[-1]
        self.assertEqual(end.type, EventType.TURN_END)
        self.assertEqual(end.payload["result"], "side1-win")
        self.assertEqual(next_state.get_available_moves(1), [])
        again = self.engine.simulate_turn(
            next_state, PlayerAction.use_move("mega_punch"), None
        )
        self.assertIs(again, next_state)

    def test_simultaneous_wipe_is_a_draw(self) -> None:
        engine = self._scripted_engine()
        state = _state(
            [make_creature("a1", hp=1, status=Status.POISON, status_turns=3)],
            [make_creature("b1", hp=1, status=Status.POISON, status_turns=3)],
        )
        next_state = engine.simulate_turn(state, None, None)
        self.assertLen(_events_of(next_state, EventType.FAINT), 2)
        self.assertEqual(next_state.result, BattleResult.DRAW)
        self.assertEqual(next_state.phase, BattlePhase.FINISHED)
        self.assertEqual(self.rng.draws, 0)


class StatusFlowTest(TurnEngineTestBase):
    def test_status_move_applies_default_duration(self) -> None:
        engine = self._scripted_engine([0.1])
        state = _state(
            [make_creature("a1", definition_id="volt", moves=("thunder_wave",))],
            [make_creature("b1")],
        )
        next_state = engine.simulate_turn(
            state, PlayerAction.use_move("thunder_wave"), None
        )
        applied = _events_of(next_state, EventType.STATUS_APPLIED)[0]
        self.assertEqual(applied.payload["status"], "paralysis")
        self.assertEqual(applied.payload["turns"], 3)
        defender = next_state.player2.active
        self.assertEqual(defender.status, Status.PARALYSIS)
        self.assertEqual(defender.status_turns_remaining, 2)
        self.assertEqual(self.rng.draws, 1)

    def test_afflicted_target_keeps_its_status(self) -> None:
        state = _state(
            [make_creature("a1", moves=("lullaby",))],
            [make_creature("b1", status=Status.POISON, status_turns=4)],
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("lullaby"), None
        )
        defender = next_state.player2.active
        self.assertEqual(defender.status, Status.POISON)
        self.assertEqual(defender.status_turns_remaining, 3)
        self.assertEqual(defender.current_hp, 88)
        self.assertEmpty(_events_of(next_state, EventType.STATUS_APPLIED))

    def test_blocked_status_still_consumes_its_roll(self) -> None:
        engine = self._scripted_engine([0.0, 0.99, 0.5, 0.05])
        state = _state(
            [make_creature("a1", definition_id="pyro", moves=("ember",))],
            [
                make_creature(
                    "b1", definition_id="leafy", hp=500, status=Status.POISON, status_turns=4
                )
            ],
        )
        next_state = engine.simulate_turn(state, PlayerAction.use_move("ember"), None)
        self.assertEqual(next_state.player2.active.status, Status.POISON)
        self.assertEmpty(_events_of(next_state, EventType.STATUS_APPLIED))
        self.assertEqual(self.rng.draws, 4)

    def test_same_status_refreshes_duration(self) -> None:
        state = _state(
            [make_creature("a1", moves=("toxic",))],
            [make_creature("b1", status=Status.POISON, status_turns=1)],
        )
        next_state = self.engine.simulate_turn(
            state, PlayerAction.use_move("toxic"), None
        )
        self.assertLen(_events_of(next_state, EventType.STATUS_APPLIED), 1)
        defender = next_state.player2.active
        self.assertEqual(defender.status, Status.POISON)
        self.assertEqual(defender.status_turns_remaining, 3)

    def test_sleep_skips_without_drawing(self) -> None:
        engine = self._scripted_engine()
        state = _state(
            [make_creature("a1", status=Status.SLEEP, status_turns=2)],
            [make_creature("b1")],
        )
        next_state = engine.simulate_turn(state, PlayerAction.use_move("tackle"), None)
        self.assertLen(_events_of(next_state, EventType.CANT_ACT), 1)
        self.assertEmpty(_events_of(next_state, EventType.MOVE_USED))
        self.assertEqual(next_state.player1.active.status_turns_remaining, 1)
        self.assertEqual(self.rng.draws, 0)

    @parameterized.named_parameters(("skipped", 0.1, False), ("acts", 0.9, True))
    def test_paralysis_skip_roll(self, roll: float, acts: bool) -> None:
        engine = self._scripted_engine([roll], default=0.99)
        state = _state(
            [make_creature("a1", status=Status.PARALYSIS, status_turns=2)],
            [make_creature("b1")],
        )
        next_state = engine.simulate_turn(state, PlayerAction.use_move("tackle"), None)
        self.assertEqual(bool(_events_of(next_state, EventType.MOVE_USED)), acts)
        self.assertEqual(bool(_events_of(next_state, EventType.CANT_ACT)), not acts)

    def test_poison_ticks_at_end_of_turn(self) -> None:
        state = _state(
            [make_creature("a1", hp=80, status=Status.POISON, status_turns=4)],
            [make_creature("b1")],
        )
        next_state = self.engine.simulate_turn(state, None, None)
        tick = _events_of(next_state, EventType.STATUS_DAMAGE)[0]
        self.assertEqual(tick.payload["damage"], 10)
        self.assertEqual(tick.payload["remaining"], 70)
        self.assertEqual(next_state.player1.active.status_turns_remaining, 3)

    def test_status_expires(self) -> None:
        state = _state(
            [make_creature("a1", status=Status.BURN, status_turns=1)],
            [make_creature("b1")],
        )
        next_state = self.engine.simulate_turn(state, None, None)
        self.assertLen(_events_of(next_state, EventType.STATUS_EXPIRED), 1)
        self.assertEqual(next_state.player1.active.status, Status.NONE)
        self.assertEqual(next_state.player1.active.current_hp, 94)

    def test_status_damage_can_faint(self) -> None:
        state = _state(
            [make_creature("a1", hp=5, max_hp=100, status=Status.POISON, status_turns=3)],
            [make_creature("b1")],
        )
        next_state = self.engine.simulate_turn(state, None, None)
        types = _types(next_state)
        self.assertLess(types.index(EventType.STATUS_DAMAGE), types.index(EventType.FAINT))
        self.assertEqual(next_state.result, BattleResult.SIDE2_WIN)

    def test_self_target_move_skips_hit_roll(self) -> None:
        engine = self._scripted_engine()
        state = _state(
            [make_creature("a1", moves=("barrier", "tackle"))], [make_creature("b1")]
        )
        next_state = engine.simulate_turn(state, PlayerAction.use_move("barrier"), None)
        active = next_state.player1.active
        self.assertEqual(active.status, Status.SHIELD)
        self.assertEqual(active.status_turns_remaining, 2)
        self.assertEqual(active.get_cooldown("barrier"), 1)
        self.assertEqual(
            _events_of(next_state, EventType.MOVE_USED)[0].target_id, "a1"
        )
        self.assertEqual(self.rng.draws, 0)

    def test_purify_cures_and_heals(self) -> None:
        state = _state(
            [
                make_creature(
                    "a1",
                    hp=50,
                    max_hp=100,
                    moves=("purify",),
                    status=Status.POISON,
                    status_turns=3,
                )
            ],
            [make_creature("b1")],
        )
        next_state = self.engine.simulate_turn(state, PlayerAction.use_move("purify"), None)
        active = next_state.player1.active
        self.assertEqual(active.status, Status.NONE)
        self.assertEqual(active.current_hp, 75)
        self.assertLen(_events_of(next_state, EventType.STATUS_CURED), 1)
        self.assertEqual(_events_of(next_state, EventType.HEAL)[0].payload["amount"], 25)
        self.assertEmpty(_events_of(next_state, EventType.STATUS_DAMAGE))


class CooldownTest(TurnEngineTestBase):
    def test_cooldown_blocks_reuse(self) -> None:
        state = _state(
            [make_creature("a1", definition_id="pyro", moves=("fire_blast", "tackle"))],
            [make_creature("b1", hp=1000)],
        )
        state = self.engine.simulate_turn(
            state, PlayerAction.use_move("fire_blast"), None
        )
        self.assertEqual(state.player1.active.get_cooldown("fire_blast"), 1)
        self.assertEqual(state.get_available_moves(1), ["tackle"])

        state = self.engine.simulate_turn(
            state, PlayerAction.use_move("fire_blast"), None
        )
        self.assertLen(_events_of(state, EventType.INVALID_ACTION), 1)
        self.assertEqual(state.player1.active.move_cooldowns, {})
        self.assertEqual(state.get_available_moves(1), ["fire_blast", "tackle"])

    def test_bench_cooldowns_tick(self) -> None:
        state = _state(
            [make_creature("a1"), make_creature("a2", cooldowns={"tackle": 2})],
            [make_creature("b1")],
        )
        next_state = self.engine.simulate_turn(state, None, None)
        self.assertEqual(next_state.player1.bench[0].get_cooldown("tackle"), 1)


class ForfeitAndDefaultActionTest(TurnEngineTestBase):
    def test_forfeit(self) -> None:
        state = _state([make_creature("a1")], [make_creature("b1")])
        forfeited = forfeit_battle(state, 1)
        self.assertEqual(forfeited.result, BattleResult.SIDE2_WIN)
        self.assertEqual(forfeited.phase, BattlePhase.FINISHED)
        self.assertEqual(_types(forfeited), [EventType.FORFEIT])
        self.assertIs(forfeit_battle(forfeited, 2), forfeited)

    def test_forfeit_rejects_bad_player(self) -> None:
        state = _state([make_creature("a1")], [make_creature("b1")])
        with self.assertRaises(ValueError):
            forfeit_battle(state, 3)

    def test_default_action_prefers_moves(self) -> None:
        state = _state(
            [make_creature("a1", moves=("slam", "tackle"), cooldowns={"slam": 1})],
            [make_creature("b1")],
        )
        self.assertEqual(default_action(state, 1), PlayerAction.use_move("tackle"))

    def test_default_action_falls_back_to_switch(self) -> None:
        state = _state(
            [make_creature("a1", cooldowns={"tackle": 2}), make_creature("a2")],
            [make_creature("b1", cooldowns={"tackle": 2})],
        )
        self.assertEqual(default_action(state, 1), PlayerAction.switch("a2"))
        self.assertIsNone(default_action(state, 2))


class SeededEngineTest(unittest.TestCase):
    def test_rng_factory_receives_turn_seed(self) -> None:
        seen = []

        def factory(seed: int) -> SeededRandom:
            seen.append(seed)
            return SeededRandom(seed)

        engine = TurnEngine(fixture_game_data(), rng_factory=factory)
        state = _state([make_creature("a1")], [make_creature("b1")], seed=100)
        state = engine.simulate_turn(state, None, None)
        engine.simulate_turn(state, None, None)
        self.assertEqual(seen, [101, 102])


if __name__ == "__main__":
    absltest.main()
