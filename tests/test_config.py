"""Tests for configuration, presets and validation (wavepeakslib.config)."""

from __future__ import annotations

import json

import pytest

from wavepeakslib.config import (
    CACHE_PARAMS,
    VIEW_PARAMS,
    ConfigError,
    build_structured_defaults,
    default_config,
    flatten_structured_config,
    load_preset,
    merge_configs,
    save_preset,
    validate_config,
    validate_config_fields,
    validate_structured_config,
)


class TestDefaults:
    def test_every_param_has_a_default(self) -> None:
        cfg = default_config()
        for spec in CACHE_PARAMS + VIEW_PARAMS:
            assert cfg[spec.key] == spec.default

    def test_defaults_validate(self) -> None:
        assert validate_config_fields(default_config()) == []
        assert validate_structured_config(build_structured_defaults()) == []

    def test_cache_tuning_values(self) -> None:
        cfg = default_config()
        assert cfg["progress_chunk"] == 10000
        assert cfg["rough_quantum"] == 100
        assert cfg["multiplicator"] == 2
        assert cfg["warmup_span"] == 20_000_000
        assert cfg["warmup_step"] == 100


class TestMerge:
    def test_later_values_win(self) -> None:
        merged = merge_configs({"mode": "peak", "width": 10}, {"width": 20})
        assert merged == {"mode": "peak", "width": 20}

    def test_none_does_not_mask_existing_value(self) -> None:
        merged = merge_configs({"mode": "rms"}, {"mode": None, "extra": None})
        assert merged == {"mode": "rms", "extra": None}


class TestValidation:
    @pytest.mark.parametrize("key, value", [
        ("mode", "loudness"),
        ("scale", 10.0),
        ("scale", 0.0),
        ("pan_speed", 0),
        ("multiplicator", 1),
        ("progress_chunk", True),
        ("width", "wide"),
        ("log_scale", None),
    ])
    def test_invalid_values_reported(self, key, value) -> None:
        errors = validate_config_fields({key: value})
        assert len(errors) == 1
        assert errors[0].key == key

    def test_int_accepted_for_float_param(self) -> None:
        assert validate_config_fields({"scale": 2, "pan_speed": 500}) == []

    def test_validate_config_raises_with_all_messages(self) -> None:
        with pytest.raises(ConfigError) as exc:
            validate_config({"mode": "x", "width": 0})
        assert "Reduction mode" in str(exc.value)
        assert "Viewport width" in str(exc.value)

    def test_unknown_keys_ignored(self) -> None:
        validate_config({"_source_file": "a.wav", "whatever": 1})


class TestStructured:
    def test_sections(self) -> None:
        structured = build_structured_defaults()
        assert set(structured) == {"cache", "view"}
        assert structured["cache"]["warmup_step"] == 100
        assert structured["view"]["mode"] == "peak"

    def test_flatten(self) -> None:
        flat = flatten_structured_config(build_structured_defaults())
        assert flat == default_config()

    def test_errors_prefixed_by_section(self) -> None:
        structured = build_structured_defaults()
        structured["cache"]["progress_chunk"] = 0
        errors = validate_structured_config(structured)
        assert [e.key for e in errors] == ["cache.progress_chunk"]

    def test_section_must_be_object(self) -> None:
        errors = validate_structured_config({"cache": [], "view": {}})
        assert [e.key for e in errors] == ["cache"]


class TestPresets:
    def test_round_trip_keeps_only_changes(self, tmp_path) -> None:
        path = tmp_path / "presets" / "rms.json"
        cfg = default_config()
        cfg.update(mode="rms", width=640, _source_file="x.wav", verbose=True)
        save_preset(cfg, str(path), description="test preset")

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["schema_version"] == "1.0"
        assert raw["_description"] == "test preset"
        assert load_preset(str(path)) == {"mode": "rms", "width": 640}

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_preset(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_preset(str(path))

    def test_non_object_root(self, tmp_path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError, match="JSON object"):
            load_preset(str(path))
