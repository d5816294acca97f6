"""
ai package – Adaptive combat AI for the boss.

Modules:
    ai_core               – Central brain (AIBrain) that orders tracker → adaptation → enemy
    behavior_tracker      – Rolling-window telemetry of the player's attacks / distance / guard
    behavior_analyzer     – Pure PlayerProfile aggregation
    style_classifier      – Profile → PlayerStyle rules
    tuning_profile        – Counter-style presets, clamp bands, lerp
    adaptation_controller – Periodic re-classification + blended tuning transitions
    agent_fsm             – Boss state machine (Idle … ArtilleryStrike) and action scoring
    choreography          – Timed attack / artillery / dash sequences
    events                – Style / state / damage events and the EventChannel
    stats                 – Encounter statistics + aggression graph
    simulation_runner     – Headless boss-vs-scripted-player encounters
"""
