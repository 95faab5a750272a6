"""Deterministic resolution of one battle turn.

A turn is a pure transform of an immutable BattleState: the same state,
actions and seed always produce the same next state and event log. All
random decisions come from one SeededRandom seeded with the battle seed
offset by the turn number, consumed in this fixed order:

1. Turn order tie-break (one draw, only when both actions tie fully).
2. Per action in turn order: status prevention (probabilistic rules only),
   hit roll (opponent-targeting moves), critical roll and damage variance
   (damaging moves that hit), status chance (0 < chance < 1 only).

Action validation, switches, faints and end-of-turn ticks never draw.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Union

from absl import logging

from arena.game.data.game_data import GameData, default_game_data
from arena.game.data.move import Move
from arena.game.engine.calculator import DamageCalculator
from arena.game.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from arena.game.engine.rng import SeededRandom, turn_seed
from arena.game.engine.status_effects import (
    apply_status,
    can_apply_status,
    check_can_act,
    cure_status,
    effective_speed,
    get_rule,
    status_duration,
    tick_status,
)
from arena.game.events.battle_event import BattleEvent
from arena.game.interface.battle_action import PlayerAction
from arena.game.schema.battle_state import BattleState
from arena.game.schema.creature_state import CreatureInstance
from arena.game.schema.enums import BattlePhase, BattleResult, EventType, Status
from arena.game.schema.player_side import PlayerSide

PLAYERS = (1, 2)


def _opponent(player: int) -> int:
    return 2 if player == 1 else 1


@dataclass(frozen=True)
class _PendingAction:
    """A validated action waiting for its turn slot."""

    player: int
    action: PlayerAction
    actor_id: str
    priority: int
    speed: int
    move: Optional[Move] = None

    def order_key(self):
        return (self.action.is_switch(), self.priority, self.speed)


@dataclass
class _TurnContext:
    """Working state while one turn resolves. Never escapes the engine."""

    turn: int
    rng: SeededRandom
    sides: Dict[int, PlayerSide]
    events: List[BattleEvent] = field(default_factory=list)

    def active(self, player: int) -> Optional[CreatureInstance]:
        return self.sides[player].active

    def set_active(self, player: int, creature: CreatureInstance) -> None:
        self.sides[player] = replace(self.sides[player], active=creature)

    def emit(
        self,
        event_type: EventType,
        player: int,
        description: str,
        actor_id: Optional[str] = None,
        target_id: Optional[str] = None,
        **payload: Any,
    ) -> None:
        self.events.append(
            BattleEvent(
                type=event_type,
                turn=self.turn,
                source_player=player,
                actor_id=actor_id,
                target_id=target_id,
                payload=payload,
                description=description,
            )
        )


class TurnEngine:
    """Resolves turns against an injected catalog and formula config.

    Example:
        >>> engine = TurnEngine(GameData.load())
        >>> next_state = engine.simulate_turn(
        ...     state, PlayerAction.use_move("ember"), PlayerAction.switch("p2-b"), 42
        ... )
        >>> [e.type.value for e in next_state.last_turn_events][:2]
        ['turn-start', 'switch']
    """

    def __init__(
        self,
        game_data: Optional[GameData] = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        rng_factory: Callable[[int], SeededRandom] = SeededRandom,
    ) -> None:
        self.game_data = game_data if game_data is not None else default_game_data()
        self.config = config
        self.calculator = DamageCalculator(self.game_data, config)
        self._rng_factory = rng_factory

    def simulate_turn(
        self,
        state: BattleState,
        action1: Optional[PlayerAction],
        action2: Optional[PlayerAction],
        seed: Optional[Union[int, str]] = None,
    ) -> BattleState:
        """Resolve one turn and return the next state.

        Args:
            state: Current battle state
            action1: Side 1's action, None to pass
            action2: Side 2's action, None to pass
            seed: Battle seed, defaults to `state.seed`

        Returns:
            The next BattleState with `last_turn_events` set. A finished
            battle is returned unchanged (the same object).
        """
        if state.result != BattleResult.ONGOING:
            return state

        turn = state.turn_number + 1
        rng = self._rng_factory(turn_seed(state.seed if seed is None else seed, turn))
        ctx = _TurnContext(
            turn=turn, rng=rng, sides={1: state.player1, 2: state.player2}
        )
        ctx.emit(EventType.TURN_START, 0, f"Turn {turn} begins")

        pending = [
            p
            for p in (
                self._validate_action(ctx, 1, action1),
                self._validate_action(ctx, 2, action2),
            )
            if p is not None
        ]
        for item in self._order_actions(ctx, pending):
            actor = ctx.active(item.player)
            if actor is None or actor.instance_id != item.actor_id:
                continue
            if item.action.is_switch():
                self._execute_switch(ctx, item.player, item.action)
            else:
                self._execute_move(ctx, item.player, item.move)
            self._check_faints(ctx)

        self._end_of_turn(ctx)

        result = self._determine_result(ctx)
        phase = (
            BattlePhase.FINISHED
            if result != BattleResult.ONGOING
            else BattlePhase.AWAITING_ACTIONS
        )
        ctx.emit(EventType.TURN_END, 0, f"Turn {turn} ends", result=result.value)

        logging.debug(
            "Battle %s turn %d resolved: %d events, result %s",
            state.battle_id,
            turn,
            len(ctx.events),
            result.value,
        )
        return replace(
            state,
            turn_number=turn,
            phase=phase,
            result=result,
            player1=ctx.sides[1],
            player2=ctx.sides[2],
            last_turn_events=tuple(ctx.events),
        )

    def _reject(
        self,
        ctx: _TurnContext,
        player: int,
        actor: CreatureInstance,
        action: PlayerAction,
        reason: str,
    ) -> None:
        logging.warning(
            "Skipping invalid action for side %d on turn %d: %s (%s)",
            player,
            ctx.turn,
            reason,
            action,
        )
        ctx.emit(
            EventType.INVALID_ACTION,
            player,
            f"Side {player} action was skipped: {reason}",
            actor_id=actor.instance_id,
            reason=reason,
            action=action.to_dict(),
        )

    def _validate_action(
        self, ctx: _TurnContext, player: int, action: Optional[PlayerAction]
    ) -> Optional[_PendingAction]:
        side = ctx.sides[player]
        actor = side.active
        if actor is None or action is None:
            return None

        speed = effective_speed(actor)
        if action.is_switch():
            target_id = action.switch_to_instance_id
            if not target_id or side.find_bench_index(target_id) is None:
                self._reject(ctx, player, actor, action, "switch target is not on the bench")
                return None
            return _PendingAction(player, action, actor.instance_id, 0, speed)

        move = self.game_data.find_move(action.move_id) if action.move_id else None
        if move is None:
            self._reject(ctx, player, actor, action, "unknown move")
            return None
        if move.id not in actor.known_move_ids:
            self._reject(ctx, player, actor, action, "move is not known by the creature")
            return None
        if actor.get_cooldown(move.id) > 0:
            self._reject(ctx, player, actor, action, "move is on cooldown")
            return None
        return _PendingAction(
            player, action, actor.instance_id, move.priority, speed, move
        )

    def _order_actions(
        self, ctx: _TurnContext, pending: List[_PendingAction]
    ) -> List[_PendingAction]:
        """Switches first, then priority, then effective speed, then a coin flip."""
        if len(pending) < 2:
            return pending
        first, second = pending
        if first.order_key() == second.order_key():
            first_goes_first = ctx.rng.chance(0.5)
        else:
            first_goes_first = first.order_key() > second.order_key()
        return [first, second] if first_goes_first else [second, first]

    def _execute_switch(
        self, ctx: _TurnContext, player: int, action: PlayerAction
    ) -> None:
        side = ctx.sides[player]
        index = side.find_bench_index(action.switch_to_instance_id or "")
        outgoing = side.active
        if index is None or outgoing is None:
            return
        incoming = side.bench[index]
        bench = list(side.bench)
        bench[index] = outgoing
        ctx.sides[player] = replace(side, active=incoming, bench=tuple(bench))
        ctx.emit(
            EventType.SWITCH,
            player,
            f"{outgoing.definition_id} was withdrawn for {incoming.definition_id}",
            actor_id=outgoing.instance_id,
            target_id=incoming.instance_id,
            forced=False,
        )

    def _execute_move(self, ctx: _TurnContext, player: int, move: Optional[Move]) -> None:
        attacker = ctx.active(player)
        if attacker is None or move is None:
            return
        opponent = _opponent(player)

        if not check_can_act(attacker, ctx.rng):
            ctx.emit(
                EventType.CANT_ACT,
                player,
                f"{attacker.definition_id} is {get_rule(attacker.status).label} "
                "and cannot move",
                actor_id=attacker.instance_id,
                status=attacker.status.value,
            )
            return

        defender = ctx.active(opponent)
        target_id = (
            attacker.instance_id
            if move.targets_self()
            else (defender.instance_id if defender is not None else None)
        )
        ctx.emit(
            EventType.MOVE_USED,
            player,
            f"{attacker.definition_id} used {move.name}",
            actor_id=attacker.instance_id,
            target_id=target_id,
            move_id=move.id,
        )
        if move.cooldown > 0:
            cooldowns = dict(attacker.move_cooldowns)
            cooldowns[move.id] = move.cooldown
            attacker = replace(attacker, move_cooldowns=cooldowns)
            ctx.set_active(player, attacker)

        if move.targets_self():
            self._apply_self_move(ctx, player, move)
            return
        if defender is None:
            return

        if not self.calculator.resolve_hit(attacker, defender, move, ctx.rng):
            ctx.emit(
                EventType.MISS,
                player,
                f"{attacker.definition_id}'s {move.name} missed",
                actor_id=attacker.instance_id,
                target_id=defender.instance_id,
                move_id=move.id,
            )
            return

        effectiveness = self.calculator.type_multiplier(move, defender)
        is_critical = False
        damage = 0
        if move.is_damaging():
            is_critical = self.calculator.resolve_critical(attacker, ctx.rng)
            damage = self.calculator.resolve_damage(
                attacker, defender, move, is_critical, ctx.rng
            )
        if effectiveness == 0:
            ctx.emit(
                EventType.NO_EFFECT,
                player,
                f"It doesn't affect {defender.definition_id}",
                actor_id=attacker.instance_id,
                target_id=defender.instance_id,
                move_id=move.id,
            )
            return

        if move.is_damaging():
            if is_critical:
                ctx.emit(
                    EventType.CRITICAL,
                    player,
                    "A critical hit!",
                    actor_id=attacker.instance_id,
                    target_id=defender.instance_id,
                )
            if effectiveness > 1:
                ctx.emit(
                    EventType.SUPER_EFFECTIVE,
                    player,
                    "It's super effective!",
                    actor_id=attacker.instance_id,
                    target_id=defender.instance_id,
                    multiplier=effectiveness,
                )
            elif effectiveness < 1:
                ctx.emit(
                    EventType.NOT_EFFECTIVE,
                    player,
                    "It's not very effective...",
                    actor_id=attacker.instance_id,
                    target_id=defender.instance_id,
                    multiplier=effectiveness,
                )
            defender = defender.with_hp(defender.current_hp - damage)
            ctx.set_active(opponent, defender)
            ctx.emit(
                EventType.DAMAGE,
                player,
                f"{defender.definition_id} took {damage} damage",
                actor_id=attacker.instance_id,
                target_id=defender.instance_id,
                damage=damage,
                remaining=defender.current_hp,
                critical=is_critical,
                effectiveness=effectiveness,
            )

        self._try_inflict_status(ctx, player, opponent, move)

    def _rolls_status(self, ctx: _TurnContext, move: Move) -> bool:
        if move.status == Status.NONE or move.status_chance <= 0:
            return False
        if move.status_chance >= 1:
            return True
        return ctx.rng.chance(move.status_chance)

    def _try_inflict_status(
        self, ctx: _TurnContext, player: int, target_player: int, move: Move
    ) -> None:
        target = ctx.active(target_player)
        if target is None or target.is_fainted:
            return
        if not self._rolls_status(ctx, move):
            return
        if not can_apply_status(target, move.status):
            return
        duration = status_duration(move.status, self.config, move)
        target = apply_status(target, move.status, duration)
        ctx.set_active(target_player, target)
        ctx.emit(
            EventType.STATUS_APPLIED,
            player,
            f"{target.definition_id} is now {get_rule(move.status).label}",
            target_id=target.instance_id,
            status=move.status.value,
            turns=target.status_turns_remaining,
        )

    def _apply_self_move(self, ctx: _TurnContext, player: int, move: Move) -> None:
        creature = ctx.active(player)
        if creature is None:
            return
        if move.cures_status and creature.has_status():
            cured = creature.status
            creature = cure_status(creature)
            ctx.set_active(player, creature)
            ctx.emit(
                EventType.STATUS_CURED,
                player,
                f"{creature.definition_id} is no longer {get_rule(cured).label}",
                target_id=creature.instance_id,
                status=cured.value,
            )
        if move.heal_fraction > 0:
            amount = max(1, math.floor(creature.max_hp * move.heal_fraction))
            healed = creature.with_hp(creature.current_hp + amount)
            restored = healed.current_hp - creature.current_hp
            creature = healed
            ctx.set_active(player, creature)
            if restored > 0:
                ctx.emit(
                    EventType.HEAL,
                    player,
                    f"{creature.definition_id} restored {restored} HP",
                    target_id=creature.instance_id,
                    amount=restored,
                    remaining=creature.current_hp,
                )
        self._try_inflict_status(ctx, player, player, move)

    def _check_faints(self, ctx: _TurnContext) -> None:
        for player in PLAYERS:
            side = ctx.sides[player]
            fainted = side.active
            if fainted is None or fainted.is_alive():
                continue
            fallen = side.fallen + (fainted,)
            ctx.emit(
                EventType.FAINT,
                player,
                f"{fainted.definition_id} fainted",
                target_id=fainted.instance_id,
            )
            if side.bench:
                incoming = side.bench[0]
                ctx.sides[player] = replace(
                    side, active=incoming, bench=side.bench[1:], fallen=fallen
                )
                ctx.emit(
                    EventType.SWITCH,
                    player,
                    f"{incoming.definition_id} was sent out",
                    actor_id=fainted.instance_id,
                    target_id=incoming.instance_id,
                    forced=True,
                )
            else:
                ctx.sides[player] = replace(side, active=None, fallen=fallen)

    def _end_of_turn(self, ctx: _TurnContext) -> None:
        for player in PLAYERS:
            creature = ctx.active(player)
            if creature is None:
                continue
            tick = tick_status(creature)
            if tick.creature is creature:
                continue
            ctx.set_active(player, tick.creature)
            label = get_rule(tick.status).label
            if tick.hp_change < 0:
                ctx.emit(
                    EventType.STATUS_DAMAGE,
                    player,
                    f"{creature.definition_id} is hurt while {label}",
                    target_id=creature.instance_id,
                    status=tick.status.value,
                    damage=-tick.hp_change,
                    remaining=tick.creature.current_hp,
                )
            elif tick.hp_change > 0:
                ctx.emit(
                    EventType.HEAL,
                    player,
                    f"{creature.definition_id} recovers while {label}",
                    target_id=creature.instance_id,
                    status=tick.status.value,
                    amount=tick.hp_change,
                    remaining=tick.creature.current_hp,
                )
            if tick.expired:
                ctx.emit(
                    EventType.STATUS_EXPIRED,
                    player,
                    f"{creature.definition_id} is no longer {label}",
                    target_id=creature.instance_id,
                    status=tick.status.value,
                )
        self._check_faints(ctx)

        for player in PLAYERS:
            side = ctx.sides[player]
            ctx.sides[player] = replace(
                side,
                active=(
                    _tick_cooldowns(side.active) if side.active is not None else None
                ),
                bench=tuple(_tick_cooldowns(c) for c in side.bench),
            )

    def _determine_result(self, ctx: _TurnContext) -> BattleResult:
        side1_alive = ctx.sides[1].has_living_creatures()
        side2_alive = ctx.sides[2].has_living_creatures()
        if side1_alive and side2_alive:
            return BattleResult.ONGOING
        if not side1_alive and not side2_alive:
            return BattleResult.DRAW
        return BattleResult.SIDE1_WIN if side1_alive else BattleResult.SIDE2_WIN


def _tick_cooldowns(creature: CreatureInstance) -> CreatureInstance:
    """Count every cooldown down by one, dropping entries that reach zero."""
    if not creature.move_cooldowns:
        return creature
    remaining = {}
    for move_id in sorted(creature.move_cooldowns):
        turns = creature.move_cooldowns[move_id] - 1
        if turns > 0:
            remaining[move_id] = turns
    return replace(creature, move_cooldowns=remaining)


def simulate_turn(
    state: BattleState,
    action1: Optional[PlayerAction],
    action2: Optional[PlayerAction],
    seed: Optional[Union[int, str]] = None,
    game_data: Optional[GameData] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> BattleState:
    """Resolve one turn with a throwaway TurnEngine."""
    return TurnEngine(game_data, config).simulate_turn(state, action1, action2, seed)


def forfeit_battle(state: BattleState, player: int) -> BattleState:
    """End the battle with `player` conceding. Finished battles are unchanged."""
    if state.result != BattleResult.ONGOING:
        return state
    side = state.get_side(player)
    result = BattleResult.SIDE2_WIN if player == 1 else BattleResult.SIDE1_WIN
    event = BattleEvent(
        type=EventType.FORFEIT,
        turn=state.turn_number,
        source_player=player,
        payload={"player_id": side.player_id, "result": result.value},
        description=f"{side.player_id} forfeited the battle",
    )
    logging.info("Battle %s forfeited by %s", state.battle_id, side.player_id)
    return replace(
        state,
        phase=BattlePhase.FINISHED,
        result=result,
        last_turn_events=(event,),
    )


def default_action(state: BattleState, player: int) -> Optional[PlayerAction]:
    """Fallback action for a side that did not choose in time.

    The first usable move, else the first bench creature, else None (pass).
    """
    moves = state.get_available_moves(player)
    if moves:
        return PlayerAction.use_move(moves[0])
    switches = state.get_available_switches(player)
    if switches:
        return PlayerAction.switch(switches[0])
    return None
