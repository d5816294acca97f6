"""
agent_fsm.py – Boss finite-state machine.

States:  Idle | Patrol | Chase | Attack | Retreat | Dodge | Stunned |
         Dash | ArtilleryStrike

Each state is a row in STATE_TABLE: an (enter, update, exit) triple of
plain functions taking the agent.  ``update`` returns the next state or
None.  The machine guarantees:

  - exactly one state is active;
  - exit(old) runs before enter(new);
  - at most one transition per tick (a forced transition requested
    through ``request_state`` replaces that tick's state update).

In Chase, special actions are scored instead of walked down an if/else
ladder:

  dash      = can_dash                      ? 1 + dash bonus      : 0
  artillery = can_use_artillery             ? 1 + artillery bonus : 0
  attack    = in_attack_range and can_attack ? 1                   : 0

The highest non-zero score wins; ties go dash, then artillery, then
attack.

The agent (entities/enemy.py) supplies the predicates and intents used
here: distance checks, cooldown gates, movement, presentation cues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple, Optional

from ai.events import EventChannel, StateTransitionEvent

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  States
# ══════════════════════════════════════════════════════════

class AgentState(str, Enum):
    IDLE = "Idle"
    PATROL = "Patrol"
    CHASE = "Chase"
    ATTACK = "Attack"
    RETREAT = "Retreat"
    DODGE = "Dodge"
    STUNNED = "Stunned"
    DASH = "Dash"
    ARTILLERY_STRIKE = "ArtilleryStrike"


# ══════════════════════════════════════════════════════════
#  Scored special-action selection
# ══════════════════════════════════════════════════════════

class SpecialAction(str, Enum):
    NONE = "none"
    DASH = "dash"
    ARTILLERY = "artillery"
    ATTACK = "attack"


@dataclass(frozen=True)
class ActionScores:
    dash: float = 0.0
    artillery: float = 0.0
    attack: float = 0.0


def score_special_actions(can_dash: bool, can_use_artillery: bool,
                          in_attack_range: bool, can_attack: bool,
                          dash_bonus: float = 0.0,
                          artillery_bonus: float = 0.0) -> ActionScores:
    return ActionScores(
        dash=1.0 + dash_bonus if can_dash else 0.0,
        artillery=1.0 + artillery_bonus if can_use_artillery else 0.0,
        attack=1.0 if (in_attack_range and can_attack) else 0.0,
    )


def select_special_action(scores: ActionScores) -> SpecialAction:
    """Highest positive score; evaluation order breaks ties."""
    if scores.dash > 0 and scores.dash >= scores.artillery and scores.dash >= scores.attack:
        return SpecialAction.DASH
    if (scores.artillery > 0 and scores.artillery >= scores.dash
            and scores.artillery >= scores.attack):
        return SpecialAction.ARTILLERY
    if scores.attack > 0:
        return SpecialAction.ATTACK
    return SpecialAction.NONE


# ══════════════════════════════════════════════════════════
#  Shared exit routing
# ══════════════════════════════════════════════════════════

def _detect_or_patrol(agent) -> AgentState:
    return AgentState.CHASE if agent.target_in_detection_range() else AgentState.PATROL


def _attack_or_chase(agent) -> AgentState:
    """Attack if possible, else Chase / Patrol."""
    if agent.target_in_attack_range() and agent.can_attack():
        return AgentState.ATTACK
    return _detect_or_patrol(agent)


def _retreat_or_chase(agent) -> AgentState:
    """Retreat if crowded, else Chase / Patrol."""
    if agent.target_too_close():
        return AgentState.RETREAT
    return _detect_or_patrol(agent)


def _after_special(agent) -> AgentState:
    """Exit routing for Dash and ArtilleryStrike."""
    if not agent.has_target:
        return AgentState.PATROL
    if agent.target_too_close():
        return AgentState.RETREAT
    return _attack_or_chase(agent)


def _should_dodge(agent) -> bool:
    return agent.incoming_threat() and agent.can_dodge()


# ══════════════════════════════════════════════════════════
#  Idle
# ══════════════════════════════════════════════════════════

def _idle_enter(agent):
    agent.stop()
    agent.set_moving(False)


def _idle_update(agent, dt: float) -> Optional[AgentState]:
    if _should_dodge(agent):
        return AgentState.DODGE
    if agent.target_in_detection_range():
        agent.face_target()
        return AgentState.CHASE
    return AgentState.PATROL


# ══════════════════════════════════════════════════════════
#  Patrol
# ══════════════════════════════════════════════════════════

def _patrol_enter(agent):
    agent.set_moving(True)


def _patrol_update(agent, dt: float) -> Optional[AgentState]:
    if _should_dodge(agent):
        return AgentState.DODGE
    if agent.target_in_detection_range():
        return AgentState.CHASE

    direction = -1 if agent.patrol_moving_left else 1
    at_edge = agent.at_left_edge() if agent.patrol_moving_left else agent.at_right_edge()
    if not at_edge:
        agent.move_in_direction(direction, agent.data.patrol_speed)
        agent.patrol_idle_timer = 0.0
        return None

    # Pause at the edge before turning round.
    agent.set_moving(False)
    agent.patrol_idle_timer += dt
    if agent.patrol_idle_timer >= agent.data.patrol_idle_duration:
        agent.patrol_moving_left = not agent.patrol_moving_left
        agent.patrol_idle_timer = 0.0
        agent.set_moving(True)
    return None


def _patrol_exit(agent):
    agent.patrol_idle_timer = 0.0


# ══════════════════════════════════════════════════════════
#  Chase
# ══════════════════════════════════════════════════════════

def _chase_enter(agent):
    agent.set_moving(True)
    agent.face_target()


def _chase_update(agent, dt: float) -> Optional[AgentState]:
    if agent.target_too_close():
        return AgentState.RETREAT
    if _should_dodge(agent):
        return AgentState.DODGE

    tuning = agent.tuning
    scores = score_special_actions(
        can_dash=agent.can_dash(),
        can_use_artillery=agent.can_use_artillery(),
        in_attack_range=agent.target_in_attack_range(),
        can_attack=agent.can_attack(),
        dash_bonus=tuning.dash_bonus,
        artillery_bonus=tuning.artillery_bonus,
    )
    action = select_special_action(scores)
    if action == SpecialAction.DASH:
        return AgentState.DASH
    if action == SpecialAction.ARTILLERY:
        agent.reset_artillery_cooldown()
        return AgentState.ARTILLERY_STRIKE
    if action == SpecialAction.ATTACK:
        return AgentState.ATTACK

    if not agent.target_in_detection_range():
        return AgentState.PATROL

    # Hold a stand-off short of attack range.
    agent.face_target()
    stopping_distance = agent.data.attack_range * agent.data.chase_stop_fraction
    if agent.distance_to_target() > stopping_distance:
        agent.move_toward_target(agent.effective_chase_speed)
        agent.set_moving(True)
    else:
        agent.stop()
        agent.set_moving(False)
    return None


def _chase_exit(agent):
    agent.set_moving(False)


# ══════════════════════════════════════════════════════════
#  Attack
# ══════════════════════════════════════════════════════════

def _attack_enter(agent):
    agent.stop()
    agent.set_moving(False)
    agent.face_target()
    agent.trigger("attack")
    # Cooldown resets after the shot leaves, not here.
    agent.attack.begin()


def _attack_update(agent, dt: float) -> Optional[AgentState]:
    choreo = agent.attack
    if not choreo.has_fired and _should_dodge(agent):
        return AgentState.DODGE

    was_fired = choreo.has_fired
    angles = choreo.advance(dt)
    if angles:
        agent.fire(angles)
    if choreo.has_fired and not was_fired:
        agent.reset_attack_cooldown()

    if choreo.has_fired and not choreo.is_attacking:
        return _retreat_or_chase(agent)
    return None


def _attack_exit(agent):
    # Drop any burst still in flight so no shot outlives the state.
    agent.attack.cancel()


# ══════════════════════════════════════════════════════════
#  Retreat
# ══════════════════════════════════════════════════════════

def _retreat_enter(agent):
    agent.set_moving(True)
    agent.face_target()


def _retreat_update(agent, dt: float) -> Optional[AgentState]:
    if _should_dodge(agent):
        return AgentState.DODGE

    timed_out = agent.fsm.state_time >= agent.data.retreat_max_time
    if agent.distance_to_target() > agent.effective_retreat_range or timed_out:
        return _attack_or_chase(agent)

    agent.face_target()
    agent.move_away_from_target(agent.effective_retreat_speed)
    return None


def _retreat_exit(agent):
    agent.set_moving(False)


# ══════════════════════════════════════════════════════════
#  Dodge
# ══════════════════════════════════════════════════════════

def _dodge_enter(agent):
    agent.reset_dodge_cooldown()
    agent.jump(agent.data.dodge_jump_force)


def _dodge_update(agent, dt: float) -> Optional[AgentState]:
    elapsed = agent.fsm.state_time
    landed = elapsed > agent.data.dodge_min_airtime and agent.is_grounded()
    if elapsed >= agent.data.dodge_duration or landed:
        return _attack_or_chase(agent)
    return None


# ══════════════════════════════════════════════════════════
#  Stunned
# ══════════════════════════════════════════════════════════

def _stunned_enter(agent):
    agent.stop()
    agent.set_moving(False)
    agent.trigger("hurt")


def _stunned_update(agent, dt: float) -> Optional[AgentState]:
    if agent.fsm.state_time >= agent.data.stun_duration:
        return _retreat_or_chase(agent)
    return None


# ══════════════════════════════════════════════════════════
#  Dash
# ══════════════════════════════════════════════════════════

def _dash_enter(agent):
    direction = agent.direction_to_target()
    agent.face_direction(direction)
    agent.dash.begin(direction, agent.data.dash_speed, agent.data.dash_duration)
    agent.apply_velocity(0.0, 0.0)
    agent.set_moving(False)
    agent.is_dashing = True
    agent.trigger("dash")
    if agent.data.debug:
        logger.info("Dash started: dir=%d speed=%.1f duration=%.2f",
                    agent.dash.direction, agent.data.dash_speed, agent.data.dash_duration)


def _dash_update(agent, dt: float) -> Optional[AgentState]:
    dash = agent.dash
    vx, vy = dash.advance(dt)
    agent.apply_velocity(vx, vy)

    if agent.has_target and dash.try_contact(agent.distance_to_target()):
        agent.apply_dash_hit(dash.direction)
        if agent.data.dash_stops_on_player_hit:
            return _after_special(agent)

    if agent.is_blocked_ahead(dash.direction):
        if agent.data.debug:
            logger.info("Dash blocked by wall, ending early.")
        return _after_special(agent)

    if dash.expired:
        return _after_special(agent)
    return None


def _dash_exit(agent):
    agent.is_dashing = False
    agent.stop()
    agent.reset_dash_cooldown()
    agent.dash.reset()


# ══════════════════════════════════════════════════════════
#  Artillery strike
# ══════════════════════════════════════════════════════════

def _artillery_enter(agent):
    agent.stop()
    agent.set_moving(False)
    agent.face_target()
    agent.trigger("artilleryStrike")
    agent.artillery_strike.begin()


def _artillery_update(agent, dt: float) -> Optional[AgentState]:
    choreo = agent.artillery_strike
    for _ in range(choreo.advance(dt)):
        agent.spawn_artillery_strike()
    if choreo.finished:
        return _after_special(agent)
    return None


def _artillery_exit(agent):
    agent.artillery_strike.reset()
    agent.reset_attack_cooldown()


# ══════════════════════════════════════════════════════════
#  State table
# ══════════════════════════════════════════════════════════

def _no_op(agent):
    pass


class StateHandlers(NamedTuple):
    enter: Callable
    update: Callable
    exit: Callable


STATE_TABLE: dict[AgentState, StateHandlers] = {
    AgentState.IDLE:             StateHandlers(_idle_enter, _idle_update, _no_op),
    AgentState.PATROL:           StateHandlers(_patrol_enter, _patrol_update, _patrol_exit),
    AgentState.CHASE:            StateHandlers(_chase_enter, _chase_update, _chase_exit),
    AgentState.ATTACK:           StateHandlers(_attack_enter, _attack_update, _attack_exit),
    AgentState.RETREAT:          StateHandlers(_retreat_enter, _retreat_update, _retreat_exit),
    AgentState.DODGE:            StateHandlers(_dodge_enter, _dodge_update, _no_op),
    AgentState.STUNNED:          StateHandlers(_stunned_enter, _stunned_update, _no_op),
    AgentState.DASH:             StateHandlers(_dash_enter, _dash_update, _dash_exit),
    AgentState.ARTILLERY_STRIKE: StateHandlers(_artillery_enter, _artillery_update, _artillery_exit),
}


# ══════════════════════════════════════════════════════════
#  State machine
# ══════════════════════════════════════════════════════════

class EnemyStateMachine:
    """Runs STATE_TABLE against one agent.

    Usage:
        fsm = EnemyStateMachine(agent, channel=channel)
        fsm.initialize(AgentState.IDLE)
        # every tick:
        fsm.update(dt)
    """

    def __init__(self, agent, channel: EventChannel | None = None,
                 table: dict[AgentState, StateHandlers] | None = None,
                 debug: bool = False,
                 on_enter: Callable[[AgentState], None] | None = None,
                 on_exit: Callable[[AgentState], None] | None = None):
        self.agent = agent
        self.channel = channel
        self.table = table or STATE_TABLE
        self.debug = debug
        # Presentation hooks, called after enter / after exit
        self.on_enter = on_enter
        self.on_exit = on_exit

        self._state: AgentState | None = None
        self._requested: AgentState | None = None
        self.state_time: float = 0.0       # seconds in the current state
        self.transition_count: int = 0

    @property
    def current_state(self) -> AgentState | None:
        return self._state

    @property
    def requested_state(self) -> AgentState | None:
        return self._requested

    def initialize(self, state: AgentState):
        self._state = state
        self._requested = None
        self.state_time = 0.0
        self.table[state].enter(self.agent)
        if self.on_enter is not None:
            self.on_enter(state)

    def reset(self, state: AgentState = AgentState.IDLE):
        """Exit whatever is running and start over in *state*."""
        if self._state is not None:
            self.table[self._state].exit(self.agent)
            if self.on_exit is not None:
                self.on_exit(self._state)
        self.transition_count = 0
        self.initialize(state)

    def change_state(self, new_state: AgentState):
        old_state = self._state
        if self.debug:
            logger.info("FSM %s -> %s", _name(old_state), new_state.value)
        else:
            logger.debug("FSM %s -> %s", _name(old_state), new_state.value)

        if old_state is not None:
            self.table[old_state].exit(self.agent)
            if self.on_exit is not None:
                self.on_exit(old_state)
        self._state = new_state
        self.state_time = 0.0
        self.table[new_state].enter(self.agent)
        if self.on_enter is not None:
            self.on_enter(new_state)
        self.transition_count += 1

        if self.channel is not None:
            self.channel.publish(StateTransitionEvent(old_state, new_state))

    def request_state(self, state: AgentState):
        """Queue a forced transition, applied on the next update."""
        self._requested = state

    def update(self, dt: float):
        if self._state is None:
            return

        if self._requested is not None:
            forced = self._requested
            self._requested = None
            self.change_state(forced)
            return

        self.state_time += dt
        next_state = self.table[self._state].update(self.agent, dt)
        if next_state is not None:
            self.change_state(next_state)


def _name(state: AgentState | None) -> str:
    return state.value if state is not None else "None"
