"""systems package – Arena physics, projectiles, artillery, health / combat, presentation cues."""

from .arena import Arena, ArenaConfig, Body
from .projectile_system import ProjectileSystem, Projectile
from .combat_system import CombatSystem, Health
from .artillery import ArtilleryStrikeManager, ArtilleryConfig
from .presentation import Presentation
