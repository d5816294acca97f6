"""
settings.py - Tunable defaults for the adaptive boss AI.

All configurable values live here so they're easy to tweak
and easy to reference from any module.  Every config dataclass
in ai/, entities/ and systems/ takes its defaults from this file.

Distances are world units, times are seconds.
"""

# ── Simulation clock ──────────────────────────────────────
FPS = 60
FIXED_DT = 1.0 / FPS
MAX_ENCOUNTER_SECONDS = 120.0  # hard cap per simulated encounter

# ── Behavior tracking (rolling window) ───────────────────
TRACKER_WINDOW_DURATION = 10.0  # seconds of attack history kept
TRACKER_SAMPLE_INTERVAL = 0.5   # seconds between distance/block samples

# ── Profile aggregation ──────────────────────────────────
NO_SAMPLES_DISTANCE = 999.0        # averageDistance when nothing sampled
AGGRESSION_FREQ_ANCHOR = 2.0       # attacks/sec treated as "very aggressive"
AGGRESSION_DISTANCE_ANCHOR = 10.0  # units treated as "very far"
AGGRESSION_FREQ_WEIGHT = 0.6
AGGRESSION_CLOSENESS_WEIGHT = 0.4

# ── Style classification thresholds ──────────────────────
AGGRESSIVE_THRESHOLD = 0.65    # aggressionScore
DEFENSIVE_THRESHOLD = 0.35     # blockRate
AERIAL_THRESHOLD = 0.4         # aerialRatio
RANGED_THRESHOLD = 0.5         # rangedRatio
AERIAL_MIN_FREQUENCY = 0.2     # attacks/sec needed before Aerial counts
RANGED_MIN_DISTANCE = 5.0      # averageDistance needed before Ranged counts

# ── Adaptation ────────────────────────────────────────────
EVALUATION_INTERVAL = 5.0      # seconds between re-classifications
TRANSITION_DURATION = 2.0      # seconds to blend old → new tuning

# Global clamp bands for adapted multipliers / bonuses
MIN_COOLDOWN_MULT = 0.5
MAX_COOLDOWN_MULT = 2.0
MIN_SPEED_MULT = 0.5
MAX_SPEED_MULT = 2.0
MIN_RANGE_MULT = 0.5
MAX_RANGE_MULT = 2.0
MIN_PRIORITY_BONUS = 0.0
MAX_PRIORITY_BONUS = 5.0

# ── Enemy movement ────────────────────────────────────────
ENEMY_PATROL_SPEED = 2.0
ENEMY_CHASE_SPEED = 3.5
ENEMY_RETREAT_SPEED = 3.0

# ── Enemy detection ranges ───────────────────────────────
ENEMY_DETECTION_RANGE = 8.0
ENEMY_ATTACK_RANGE = 5.0
ENEMY_RETREAT_RANGE = 2.0          # closer than this → retreat
ENEMY_PROJECTILE_DETECTION_RANGE = 3.0
CHASE_STOP_FRACTION = 0.8          # hold at 80% of attack range

# ── Enemy combat ──────────────────────────────────────────
ENEMY_ATTACK_COOLDOWN = 1.5
ENEMY_DAMAGE = 1
ENEMY_PROJECTILE_SPEED = 9.0

# ── Enemy dodge ───────────────────────────────────────────
ENEMY_DODGE_COOLDOWN = 3.0
ENEMY_DODGE_JUMP_FORCE = 8.0
DODGE_DURATION = 0.4               # max seconds in Dodge
DODGE_MIN_AIRTIME = 0.15           # grounded check ignored before this

# ── Enemy stun / retreat / patrol ─────────────────────────
ENEMY_STUN_DURATION = 0.5
RETREAT_MAX_TIME = 1.5
ENEMY_PATROL_IDLE_DURATION = 1.0

# ── Dash ──────────────────────────────────────────────────
DASH_SPEED = 12.0
DASH_DURATION = 0.35
DASH_DAMAGE = 1
DASH_KNOCKBACK_FORCE = 6.0
DASH_STOPS_ON_PLAYER_HIT = False
DASH_COOLDOWN = 4.0
DASH_MIN_RANGE = 3.0
DASH_MAX_RANGE = 7.0
DASH_CONTACT_RANGE = 1.2
DASH_WALL_CAST_DISTANCE = 0.2

# ── Attack choreography ──────────────────────────────────
ATTACK_FIRE_DELAY = 0.3            # windup before the shot leaves
BURST_SHOT_COUNT = 3
BURST_SHOT_INTERVAL = 0.15
SPREAD_ANGLES = (-15.0, 0.0, 15.0)  # degrees
PATTERN_CYCLE_LENGTH = 6           # Single, Single, Burst, Single, Single, Spread

# ── Artillery strike ──────────────────────────────────────
ARTILLERY_COOLDOWN = 8.0
ARTILLERY_WINDUP = 0.5
ARTILLERY_STRIKE_INTERVAL = 0.4
ARTILLERY_TOTAL_STRIKES = 5
ARTILLERY_STATE_DURATION = 3.5
ARTILLERY_POOL_SIZE = 10
ARTILLERY_SPAWN_HEIGHT = 12.0
ARTILLERY_HORIZONTAL_SPREAD = 3.0
ARTILLERY_FALL_SPEED = 14.0
ARTILLERY_DAMAGE = 1
ARTILLERY_IMPACT_RADIUS = 1.0
ARTILLERY_IMPACT_HEIGHT = 0.5      # a target higher than this above the floor is clear

# ── Arena (reference physics collaborator) ───────────────
ARENA_LEFT = -12.0
ARENA_RIGHT = 12.0
ARENA_FLOOR_Y = 0.0
GRAVITY = 25.0                     # units/s²
BODY_HALF_WIDTH = 0.5
BODY_HEIGHT = 2.0
FIRE_POINT_HEIGHT = 1.0            # projectiles leave at mid-body
GROUND_TOLERANCE = 0.01
GROUND_FRICTION = 8.0              # horizontal damping on the floor, 1/s

BOSS_START_X = 6.0
PLAYER_START_X = -6.0
PATROL_LEFT_EDGE = 2.0
PATROL_RIGHT_EDGE = 9.0

# ── Health ────────────────────────────────────────────────
PLAYER_MAX_HP = 20.0
BOSS_MAX_HP = 40.0
BLOCK_DAMAGE_DIVISOR = 2.0         # blocking halves incoming damage

# ── Projectiles ───────────────────────────────────────────
PROJECTILE_LIFETIME = 3.0
PROJECTILE_HIT_RADIUS = 0.6

# ── Scripted opponent ─────────────────────────────────────
PLAYER_MOVE_SPEED = 4.0
PLAYER_JUMP_FORCE = 9.0
PLAYER_MELEE_RANGE = 1.8
PLAYER_MELEE_DAMAGE = 1.0
PLAYER_PROJECTILE_SPEED = 10.0
PLAYER_PROJECTILE_DAMAGE = 1.0

# ── Encounter stats ───────────────────────────────────────
AGGRESSION_SNAPSHOT_INTERVAL = 5.0
STATS_PLOT_FILENAME = "aggression_trend.png"
