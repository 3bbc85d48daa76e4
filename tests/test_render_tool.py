"""
Render tool tests: render_one_shot outputs, debug JSON, CLI subcommands, exporter naming.
"""
import sys
import os
import io
import json
import zipfile
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import torch
from tools.render import main
from tools.render_core import get_unique_output_dir, render_one_shot
from edgenoise import NoiseRequest, generate_noise
from edgenoise.core.io import AudioIO
from edgenoise.export.exporter import Exporter, export_basename


@pytest.fixture
def temp_output_dir(tmp_path):
    return Path(tmp_path) / "test_renders"


class TestRenderOneShot:
    def test_writes_wav_and_matches_engine(self, temp_output_dir):
        params = {"sample_rate": 16000, "sample_count": 100, "distribution": "uniform",
                  "target_level_dbfs": -60, "seed": 7}
        audio, info = render_one_shot(params, temp_output_dir, script_name="test")
        wav_path = temp_output_dir / "noise_uniform_-60dBFS_16000Hz_100smp.wav"
        assert info["output_paths"] == [str(wav_path)]
        assert wav_path.stat().st_size == 244
        expected = generate_noise(NoiseRequest(16000, 100, "uniform", -60, seed=7))
        assert torch.equal(audio, expected)

    def test_both_formats(self, temp_output_dir):
        _, info = render_one_shot({"sample_count": 50, "seed": 1}, temp_output_dir, filename="pad", fmt="both")
        assert (temp_output_dir / "pad.wav").stat().st_size == 144
        assert (temp_output_dir / "pad.pcm").stat().st_size == 100
        assert len(info["output_paths"]) == 2

    def test_fingerprint_stable_for_seed(self, temp_output_dir):
        _, a = render_one_shot({"sample_count": 300}, temp_output_dir, filename="a", seed=5)
        _, b = render_one_shot({"sample_count": 300}, temp_output_dir, filename="b", seed=5)
        assert a["fingerprint"]["sha256"] == b["fingerprint"]["sha256"]

    def test_unseeded_render_records_seed(self, temp_output_dir):
        audio, info = render_one_shot({"sample_count": 300}, temp_output_dir, filename="u")
        assert isinstance(info["seed"], int)
        again, _ = render_one_shot({"sample_count": 300}, temp_output_dir, filename="v", seed=info["seed"])
        assert torch.equal(audio, again)

    def test_debug_json_and_qc(self, temp_output_dir):
        _, info = render_one_shot({"sample_count": 4800, "seed": 2}, temp_output_dir,
                                  filename="dbg", debug=True, qc=True)
        data = json.loads((temp_output_dir / "dbg.resolved.json").read_text())
        assert data["seed"] == 2
        assert data["request"]["sample_count"] == 4800
        assert data["qc_result"]["status"] == "PASS"
        assert info["qc_result"]["metrics"]["first"] == 0.0

    def test_unknown_format(self, temp_output_dir):
        with pytest.raises(ValueError):
            render_one_shot({}, temp_output_dir, fmt="flac")


def test_unique_output_dir_layout():
    d = get_unique_output_dir("one_shot")
    assert d.parts[0] == "renders"
    assert d.parts[1] == "one_shot"


class TestCli:
    def test_one_shot(self, temp_output_dir, capsys):
        code = main(["one-shot", "--samples", "100", "--sample-rate", "16000", "--distribution", "uniform",
                     "--level", "-60", "--seed", "7", "--output-dir", str(temp_output_dir), "--qc"])
        assert code == 0
        assert (temp_output_dir / "noise_uniform_-60dBFS_16000Hz_100smp.wav").stat().st_size == 244
        assert "QC Status" in capsys.readouterr().out

    def test_one_shot_raw_with_flags(self, temp_output_dir):
        code = main(["one-shot", "--samples", "64", "--seed", "abc", "--format", "raw",
                     "--no-dc-removal", "--soften-edges", "--filename", "x",
                     "--output-dir", str(temp_output_dir)])
        assert code == 0
        assert (temp_output_dir / "x.pcm").stat().st_size == 128

    def test_params_json(self, temp_output_dir, tmp_path):
        params_path = tmp_path / "p.json"
        params_path.write_text(json.dumps({"sampleRate": 8000, "durationMs": 10, "seed": 1}))
        code = main(["one-shot", "--params-json", str(params_path), "--filename", "p",
                     "--output-dir", str(temp_output_dir)])
        assert code == 0
        assert (temp_output_dir / "p.wav").stat().st_size == 44 + 160

    def test_invalid_rate_exit_code(self, temp_output_dir, capsys):
        code = main(["one-shot", "--sample-rate", "0", "--output-dir", str(temp_output_dir)])
        assert code == 2
        assert "sample_rate" in capsys.readouterr().err

    def test_bundle(self, temp_output_dir):
        code = main(["bundle", "--samples", "10", "--seed", "1", "--output-dir", str(temp_output_dir)])
        assert code == 0
        zip_path = temp_output_dir / "noise_gaussian_-80dBFS_48000Hz_10smp.zip"
        with zipfile.ZipFile(zip_path) as zf:
            assert "noise_info.json" in zf.namelist()

    def test_self_test(self, capsys):
        assert main(["self-test"]) == 0
        assert "passed" in capsys.readouterr().out


def test_export_basename():
    req = NoiseRequest(44100, 9600, "gaussian", -79.6)
    assert export_basename(req) == "noise_gaussian_-80dBFS_44100Hz_9600smp"


def test_bundle_zip_seed_state_reproduces():
    req = NoiseRequest(48000, 64, seed="pad")
    with zipfile.ZipFile(io.BytesIO(Exporter.create_bundle_zip(req))) as zf:
        info = json.loads(zf.read("noise_info.json"))
        pcm = zf.read(f"{export_basename(req)}.pcm")
    assert info["request"]["seed"] == "pad"
    again = generate_noise(NoiseRequest(48000, 64, seed=info["seed_state"]))
    assert AudioIO.to_bytes(again, 48000, format="RAW") == pcm


def test_audio_io_rejects_unknown_format():
    with pytest.raises(ValueError):
        AudioIO.to_bytes(torch.zeros(4, dtype=torch.float64), 48000, format="MP3")
