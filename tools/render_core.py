"""
Core rendering utilities with debug outputs, fingerprinting, and param tracing.
Used by canonical render.py tool.
"""
import sys
import os
import json
import hashlib
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import torch

from edgenoise.core.io import AudioIO
from edgenoise.dsp.postchain import peak, rms
from edgenoise.dsp.rng import entropy_seed
from edgenoise.export.exporter import export_basename
from edgenoise.generator import NoiseEngine
from edgenoise.params.resolve import build_request, resolve_params
from edgenoise.qc.qc import analyze

FORMATS = ("wav", "raw", "both")


def _get_git_hash() -> str:
    """Get short git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            cwd=os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    if result.returncode == 0:
        return result.stdout.strip()
    return "unknown"


def _compute_audio_fingerprint(audio: torch.Tensor) -> Dict:
    """Compute fingerprint: SHA256 over float64 bytes, peak, RMS."""
    audio_1d = audio.reshape(-1).to(torch.float64)
    sha256 = hashlib.sha256(audio_1d.numpy().tobytes()).hexdigest()
    return {
        "sha256": sha256,
        "sample_count": audio_1d.numel(),
        "peak": peak(audio_1d),
        "rms": rms(audio_1d),
    }


def render_one_shot(
    params: dict,
    output_dir: Path,
    filename: Optional[str] = None,
    seed=None,
    fmt: str = "wav",
    debug: bool = False,
    qc: bool = False,
    script_name: str = "unknown",
) -> Tuple[torch.Tensor, Dict]:
    """
    Render one noise buffer with full param tracing and fingerprinting.

    Args:
        params: Input params dict (engine names or camelCase aliases)
        output_dir: Directory to save audio and debug JSON
        filename: Base filename without extension (None = export_basename)
        seed: Seed override (None = params seed, else a fresh entropy seed)
        fmt: "wav", "raw" or "both"
        debug: Save <filename>.resolved.json with the param trace
        qc: Run QC analysis
        script_name: Name of calling script (for debug JSON)

    Returns:
        Tuple of (audio_tensor, debug_info_dict)
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format: {fmt}")
    input_params = dict(params) if params else {}

    # Step 1: Resolve params (aliases, defaults, clamps)
    resolved_params = resolve_params(input_params)
    if seed is not None:
        resolved_params["seed"] = seed

    # Step 2: Build request; draw a seed so every render can be repeated
    request = build_request(resolved_params)
    if request.seed is None:
        request.seed = entropy_seed()
        resolved_params["seed"] = request.seed

    # Step 3: Render
    engine = NoiseEngine()
    audio = engine.render(request)

    # Step 4: Fingerprint and optional QC
    fingerprint = _compute_audio_fingerprint(audio)
    qc_result = None
    if qc:
        qc_result = analyze(
            audio,
            request.sample_rate,
            request.target_level_dbfs,
            zero_endpoints=request.zero_endpoints,
            remove_dc=request.remove_dc,
        )

    # Step 5: Save audio
    output_dir = Path(output_dir)
    filename = filename or export_basename(request)
    paths = []
    if fmt in ("wav", "both"):
        paths.append(AudioIO.save_wav(audio, request.sample_rate, output_dir / f"{filename}.wav"))
    if fmt in ("raw", "both"):
        paths.append(AudioIO.save_pcm(audio, request.sample_rate, output_dir / f"{filename}.pcm"))

    debug_info = {
        "script_name": script_name,
        "timestamp": datetime.now().isoformat(),
        "git_hash": _get_git_hash(),
        "seed": request.seed,
        "seed_state": engine.last_seed,
        "input_params": input_params,
        "resolved_params": resolved_params,
        "request": request.to_dict(),
        "fingerprint": fingerprint,
        "qc_result": qc_result,
        "output_paths": [str(p) for p in paths],
    }

    if debug:
        json_path = output_dir / f"{filename}.resolved.json"
        with open(json_path, "w") as f:
            json.dump(debug_info, f, indent=2, default=str)

    return audio, debug_info


def get_unique_output_dir(base_name: str) -> Path:
    """
    Generate unique output directory: renders/{base_name}/YYYYMMDD_HHMMSS_{gitshort}/
    """
    now = datetime.now()
    date_str = now.strftime("%Y%m%d")
    time_str = now.strftime("%H%M%S")
    git_hash = _get_git_hash()
    short_hash = git_hash[:8] if git_hash != "unknown" else "unknown"

    unique_dir = Path("renders") / base_name / f"{date_str}_{time_str}_{short_hash}"
    return unique_dir
