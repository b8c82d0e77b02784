"""Tests for continuity gate config resolution."""

import pytest


class TestResolveDefaults:
    def test_empty_config(self):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({})
        assert config.enabled is True
        assert config.pass_score == 6.8
        assert config.reject_score == 4.9
        assert config.max_repair_attempts == 1

    @pytest.mark.parametrize("value", [None, "bad", 42, ["x"]])
    def test_non_mapping_config(self, value):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config(value)
        assert config.pass_score == 6.8
        assert config.enabled is True

    def test_custom_defaults(self):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config(
            {},
            default_review_pass_threshold=8.0,
            default_reject_score=5.0,
            default_max_repair_attempts=2,
        )
        assert config.pass_score == 7.4
        assert config.reject_score == 5.0
        assert config.max_repair_attempts == 2


class TestResolveClamping:
    def test_out_of_range_values_clamped(self):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({
            "review": {"passThreshold": "9.8"},
            "continuityGate": {
                "enabled": False,
                "passScore": 10,
                "rejectScore": "9.9",
                "maxRepairAttempts": "3.2",
            },
        })
        assert config.enabled is False
        assert config.pass_score == 9.5
        assert config.reject_score == 9.1
        assert config.max_repair_attempts == 3

    def test_derived_pass_score_clamped(self):
        from continuity.gate_config import resolve_continuity_gate_config
        assert resolve_continuity_gate_config({"review": {"passThreshold": 9.8}}).pass_score == 8.2
        assert resolve_continuity_gate_config({"review": {"passThreshold": 3}}).pass_score == 5.8

    def test_low_pass_score_floor(self):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({"continuityGate": {"passScore": 1, "rejectScore": 0}})
        assert config.pass_score == 4.5
        assert config.reject_score == 3.5

    def test_reject_always_below_pass(self):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({"continuityGate": {"passScore": 6, "rejectScore": 8}})
        assert config.reject_score == 5.6
        assert config.reject_score < config.pass_score

    def test_negative_repairs_floor_at_zero(self):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({"continuityGate": {"maxRepairAttempts": -4}})
        assert config.max_repair_attempts == 0

    def test_snake_case_keys(self):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({
            "review": {"pass_threshold": 8.0},
            "continuity_gate": {"reject_score": 5.5, "max_repair_attempts": 2},
        })
        assert config.pass_score == 7.4
        assert config.reject_score == 5.5
        assert config.max_repair_attempts == 2


class TestResolveJunk:
    @pytest.mark.parametrize("junk", [True, "abc", "", float("nan"), float("inf"), 10 ** 400, None, [1]])
    def test_junk_numbers_fall_back(self, junk):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({
            "review": {"passThreshold": junk},
            "continuityGate": {"passScore": junk, "rejectScore": junk, "maxRepairAttempts": junk},
        })
        assert config.pass_score == 6.8
        assert config.reject_score == 4.9
        assert config.max_repair_attempts == 1

    @pytest.mark.parametrize("flag", ["false", "0", "no", "OFF", False])
    def test_disabled_flags(self, flag):
        from continuity.gate_config import resolve_continuity_gate_config
        assert resolve_continuity_gate_config({"continuityGate": {"enabled": flag}}).enabled is False

    @pytest.mark.parametrize("flag", [True, "true", 1, None, "yes"])
    def test_enabled_flags(self, flag):
        from continuity.gate_config import resolve_continuity_gate_config
        assert resolve_continuity_gate_config({"continuityGate": {"enabled": flag}}).enabled is True

    def test_settings_defaults_feed_resolver(self, settings):
        from continuity.gate_config import resolve_continuity_gate_config
        config = resolve_continuity_gate_config({}, **settings.gate_config_defaults())
        assert config.pass_score == 6.8
        assert config.max_repair_attempts == settings.default_max_repair_attempts


class TestResolveLargeIntegers:
    def test_json_long_integer_literals_fall_back(self):
        import json
        from continuity.gate_config import resolve_continuity_gate_config
        raw = '{"review": {"passThreshold": 1' + "0" * 400 + '}, "continuityGate": {"maxRepairAttempts": 1' + "0" * 400 + "}}"
        config = resolve_continuity_gate_config(json.loads(raw))
        assert config.pass_score == 6.8
        assert config.max_repair_attempts == 1
