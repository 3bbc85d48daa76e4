"""
Service tests for edgenoise/main.py via FastAPI's TestClient.
"""
import sys
import os
import base64
import io
import json
import zipfile

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from fastapi.testclient import TestClient
from edgenoise.export.pcm import parse_wav_header
from edgenoise.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_schema(client):
    r = client.get("/params/schema")
    assert r.status_code == 200
    assert r.json()["target_level_dbfs"]["default"] == -80.0


def test_generate_wav_scenario(client):
    body = {"sampleRate": 16000, "sampleCount": 100, "distribution": "uniform",
            "targetLevelDbfs": -60, "seed": 7}
    r = client.post("/generate", json=body)
    assert r.status_code == 200
    data = r.json()
    wav = base64.b64decode(data["audio"])
    assert len(wav) == 244
    assert wav[0:4] == b"RIFF" and wav[8:12] == b"WAVE"
    assert parse_wav_header(wav)["sample_rate"] == 16000
    assert data["filename"] == "noise_uniform_-60dBFS_16000Hz_100smp.wav"
    assert data["seed"] == 7
    assert data["qc"]["status"] in ("PASS", "WARN")
    assert data["resolved_params"]["distribution"] == "uniform"


def test_generate_is_deterministic_with_seed(client):
    body = {"sample_count": 500, "seed": "abc"}
    a = client.post("/generate", json=body).json()["audio"]
    b = client.post("/generate", json=body).json()["audio"]
    assert a == b


def test_generate_raw(client):
    r = client.post("/generate?format=raw", json={"sample_count": 1234, "seed": 9})
    assert r.status_code == 200
    data = r.json()
    assert len(base64.b64decode(data["audio"])) == 2468
    assert data["filename"].endswith(".pcm")


def test_unseeded_generate_reports_seed(client):
    data = client.post("/generate", json={"sample_count": 300}).json()
    assert isinstance(data["seed"], int)
    again = client.post("/generate", json={"sample_count": 300, "seed": data["seed"]}).json()
    assert again["audio"] == data["audio"]


def test_empty_count(client):
    data = client.post("/generate?format=raw", json={"sample_count": -4, "seed": 1}).json()
    assert data["audio"] == ""
    assert data["sample_count"] == 0


def test_invalid_sample_rate_is_422(client):
    r = client.post("/generate", json={"sample_rate": 0, "sample_count": 10})
    assert r.status_code == 422
    assert "sample_rate" in r.json()["detail"]


def test_oversized_count_is_422(client):
    r = client.post("/generate", json={"sample_count": 10 ** 12})
    assert r.status_code == 422
    assert "sample_count" in r.json()["detail"]
    r = client.post("/generate/file", json={"durationMs": 10 ** 9})
    assert r.status_code == 422


def test_string_flags(client):
    r = client.post("/generate?format=raw", json={"sample_count": 64, "seed": 2, "zeroEndpoints": "false"})
    assert r.status_code == 200
    assert r.json()["sample_count"] == 64
    r = client.post("/generate", json={"sample_count": 64, "removeDc": "maybe"})
    assert r.status_code == 422
    assert "remove_dc" in r.json()["detail"]


def test_invalid_format_is_422(client):
    r = client.post("/generate?format=mp3", json={})
    assert r.status_code == 422


def test_generate_file(client):
    r = client.post("/generate/file", json={"sample_count": 100, "sample_rate": 16000, "seed": 7})
    assert r.status_code == 200
    assert r.headers["content-type"] == "audio/wav"
    assert "noise_gaussian_-80dBFS_16000Hz_100smp.wav" in r.headers["content-disposition"]
    assert r.headers["x-noise-seed"] == "7"
    assert len(r.content) == 244


def test_export_bundle(client):
    r = client.post("/export/bundle", json={"sample_count": 200, "seed": 3})
    assert r.status_code == 200
    with zipfile.ZipFile(io.BytesIO(r.content)) as zf:
        names = set(zf.namelist())
        base = "noise_gaussian_-80dBFS_48000Hz_200smp"
        assert names == {f"{base}.wav", f"{base}.pcm", "noise_info.json"}
        assert len(zf.read(f"{base}.wav")) == 44 + 400
        assert len(zf.read(f"{base}.pcm")) == 400
        info = json.loads(zf.read("noise_info.json"))
        assert info["request"]["seed"] == 3


def test_selftest_endpoint(client):
    r = client.get("/selftest")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "PASS"
    assert all(item["passed"] for item in data["results"])
