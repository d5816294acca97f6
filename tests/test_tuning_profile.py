"""
Tests for presets, clamp bands and the tuning blend.
"""

import pytest

from ai.style_classifier import PlayerStyle
from ai.tuning_profile import (
    COOLDOWN_BAND, PRIORITY_BAND, RANGE_BAND,
    TuningProfile, clamp, default_profile, effective, lerp, lerp_profile, preset_for,
)


class TestPresets:
    def test_every_style_has_a_preset(self):
        names = {style: preset_for(style).name for style in PlayerStyle}
        assert names[PlayerStyle.BALANCED] == "Default"
        assert names[PlayerStyle.AGGRESSIVE] == "AntiAggressive"
        assert names[PlayerStyle.DEFENSIVE] == "AntiDefensive"
        assert names[PlayerStyle.AERIAL] == "AntiAerial"
        assert names[PlayerStyle.RANGED] == "AntiRanged"

    def test_override_replaces_builtin(self):
        custom = TuningProfile(name="Custom", chase_speed_mult=1.9)
        assert preset_for(PlayerStyle.RANGED, {PlayerStyle.RANGED: custom}) is custom

    def test_profiles_are_frozen(self):
        profile = default_profile()
        with pytest.raises(Exception):
            profile.chase_speed_mult = 3.0


class TestBands:
    def test_effective_clamps_multiplier(self):
        assert effective(2.0, 3.0, RANGE_BAND) == pytest.approx(4.0)
        assert effective(2.0, 0.1, RANGE_BAND) == pytest.approx(1.0)
        assert effective(1.5, 0.75, COOLDOWN_BAND) == pytest.approx(1.125)

    def test_bonus_is_clamped(self):
        profile = TuningProfile(dash_priority_bonus=9.0, artillery_priority_bonus=-1.0)
        assert profile.dash_bonus == PRIORITY_BAND[1]
        assert profile.artillery_bonus == PRIORITY_BAND[0]

    def test_clamp(self):
        assert clamp(0.3, (0.5, 2.0)) == 0.5
        assert clamp(1.2, (0.5, 2.0)) == 1.2


class TestLerp:
    def test_scalar_endpoints_exact(self):
        assert lerp(0.7, 1.3, 0.0) == 0.7
        assert lerp(0.7, 1.3, 1.0) == 1.3

    def test_profile_endpoints_and_clamping(self):
        a = default_profile()
        b = preset_for(PlayerStyle.AGGRESSIVE)
        assert lerp_profile(a, b, 0.0) is a
        assert lerp_profile(a, b, 1.0) is b
        assert lerp_profile(a, b, -3.0) is a
        assert lerp_profile(a, b, 7.0) is b

    def test_midpoint(self):
        a = default_profile()
        b = preset_for(PlayerStyle.AGGRESSIVE)
        mid = lerp_profile(a, b, 0.5)
        for name, value in mid.numeric_fields().items():
            expected = (getattr(a, name) + getattr(b, name)) / 2
            assert value == pytest.approx(expected), name

    def test_blend_is_monotonic(self):
        a = default_profile()
        b = preset_for(PlayerStyle.AGGRESSIVE)
        steps = [lerp_profile(a, b, i / 10) for i in range(11)]
        ranges = [p.retreat_range_mult for p in steps]
        cooldowns = [p.attack_cooldown_mult for p in steps]
        assert ranges == sorted(ranges)
        assert cooldowns == sorted(cooldowns, reverse=True)

    def test_chained_blend_keeps_target_name(self):
        a = default_profile()
        b = preset_for(PlayerStyle.RANGED)
        c = preset_for(PlayerStyle.AERIAL)
        mid = lerp_profile(lerp_profile(a, b, 0.5), c, 0.5)
        assert mid.name == "AntiAerial"
