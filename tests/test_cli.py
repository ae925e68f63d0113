"""Tests for the command-line front-end (wavepeaks.py)."""

from __future__ import annotations

import json

import pytest

pytest.importorskip("rich")

import wavepeaks  # noqa: E402


class TestMain:
    def test_prints_table(self, sine_wav, capsys) -> None:
        assert wavepeaks.main([sine_wav, "--rows", "5"]) == 0
        out = capsys.readouterr().out
        assert "sine.wav" in out
        assert "Peak Values" in out

    def test_rms_without_warmup(self, sine_wav) -> None:
        assert wavepeaks.main([sine_wav, "--mode", "rms", "--no-warmup"]) == 0

    def test_explicit_resolution(self, sine_wav, capsys) -> None:
        assert wavepeaks.main([sine_wav, "--samples-per-px", "100",
                               "--width", "40"]) == 0
        out = capsys.readouterr().out
        assert "100 samples/px" in out
        assert "40 columns" in out

    def test_zoomed_view(self, sine_wav) -> None:
        assert wavepeaks.main([sine_wav, "--zoom", "4", "--position", "0.5"]) == 0

    def test_missing_file(self, tmp_path) -> None:
        assert wavepeaks.main([str(tmp_path / "missing.wav")]) == 1

    def test_unreadable_file(self, tmp_path) -> None:
        path = tmp_path / "broken.wav"
        path.write_bytes(b"nope")
        assert wavepeaks.main([str(path)]) == 1

    def test_zoom_below_one_rejected(self, sine_wav) -> None:
        with pytest.raises(SystemExit) as exc:
            wavepeaks.main([sine_wav, "--zoom", "0.5"])
        assert exc.value.code == 2


class TestPresets:
    def test_save_then_load(self, sine_wav, tmp_path) -> None:
        preset = tmp_path / "rms.json"
        assert wavepeaks.main([sine_wav, "--mode", "rms", "--width", "320",
                               "--save-preset", str(preset)]) == 0
        data = json.loads(preset.read_text(encoding="utf-8"))
        assert data["mode"] == "rms"
        assert data["width"] == 320
        assert "_source_file" not in data

        assert wavepeaks.main([sine_wav, "--preset", str(preset)]) == 0

    def test_invalid_preset_values(self, sine_wav, tmp_path) -> None:
        preset = tmp_path / "bad.json"
        preset.write_text(json.dumps({"mode": "loudness"}), encoding="utf-8")
        assert wavepeaks.main([sine_wav, "--preset", str(preset)]) == 2

    def test_missing_preset(self, sine_wav, tmp_path) -> None:
        assert wavepeaks.main([sine_wav, "--preset",
                               str(tmp_path / "none.json")]) == 2
