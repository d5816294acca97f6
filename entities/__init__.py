"""entities package – The adaptive boss and the scripted player."""

from .enemy import Enemy, EnemyData
from .player import ScriptedPlayer, StyleScript
