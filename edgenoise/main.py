from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
import base64

from edgenoise import __version__
from edgenoise.core.io import AudioIO
from edgenoise.core.types import NoiseRequestError
from edgenoise.dsp.rng import entropy_seed
from edgenoise.export.exporter import Exporter, export_basename
from edgenoise.generator import NoiseEngine
from edgenoise.params.resolve import build_request, resolve_params
from edgenoise.params.schema import PARAM_SCHEMA
from edgenoise.qc.qc import analyze
from edgenoise.qc.selftest import run_self_tests

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("edgenoise")

app = FastAPI(
    title="Edge Noise Engine",
    version=__version__,
    description="Endpoint-constrained padding noise generator"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Allow any local port
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

FORMATS = {"wav": "WAV", "raw": "RAW"}


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "edgenoise-engine"}


@app.get("/params/schema")
async def params_schema():
    return PARAM_SCHEMA


def _prepare(params: dict, format: str):
    """Resolve params into a request. Unseeded requests get a reported entropy seed."""
    if format not in FORMATS:
        raise HTTPException(status_code=422, detail=f"format must be one of {sorted(FORMATS)}")
    resolved = resolve_params(params)
    try:
        request = build_request(resolved)
    except NoiseRequestError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if request.seed is None:
        request.seed = entropy_seed()
        resolved["seed"] = request.seed
    return resolved, request


@app.post("/generate")
async def generate(params: dict, format: str = "wav"):
    """
    Generates a padding-noise buffer.
    Returns JSON with base64-encoded audio, QC metrics and resolved_params.
    """
    resolved, request = _prepare(params, format)
    audio = NoiseEngine().render(request)
    audio_bytes = AudioIO.to_bytes(audio, request.sample_rate, format=FORMATS[format])
    qc = analyze(
        audio,
        request.sample_rate,
        request.target_level_dbfs,
        zero_endpoints=request.zero_endpoints,
        remove_dc=request.remove_dc,
    )
    if qc["status"] == "FAIL":
        logger.warning("QC failed for %s: %s", export_basename(request), qc["failures"])

    return {
        "audio": base64.b64encode(audio_bytes).decode("utf-8"),
        "format": format,
        "filename": f"{export_basename(request)}.{'wav' if format == 'wav' else 'pcm'}",
        "sample_rate": request.sample_rate,
        "sample_count": request.sample_count,
        "seed": request.seed,
        "qc": qc,
        "resolved_params": resolved,
    }


@app.post("/generate/file")
async def generate_file(params: dict, format: str = "wav"):
    """Generates a buffer and returns the encoded file itself."""
    _, request = _prepare(params, format)
    audio = NoiseEngine().render(request)
    audio_bytes = AudioIO.to_bytes(audio, request.sample_rate, format=FORMATS[format])
    ext = "wav" if format == "wav" else "pcm"
    return Response(
        content=audio_bytes,
        media_type="audio/wav" if format == "wav" else "application/octet-stream",
        headers={
            "Content-Disposition": f"attachment; filename={export_basename(request)}.{ext}",
            "X-Noise-Seed": str(request.seed),
        },
    )


@app.post("/export/bundle")
async def export_bundle(params: dict):
    """
    Generates a ZIP with WAV, raw PCM and noise_info.json.
    """
    _, request = _prepare(params, "wav")
    zip_bytes = Exporter.create_bundle_zip(request)
    return Response(
        content=zip_bytes,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={export_basename(request)}.zip"}
    )


@app.get("/selftest")
async def selftest():
    results = run_self_tests()
    passed = all(r.passed for r in results)
    if not passed:
        logger.warning("self test failures: %s", [r.name for r in results if not r.passed])
    return {
        "status": "PASS" if passed else "FAIL",
        "results": [r.to_dict() for r in results],
    }


if __name__ == "__main__":
    uvicorn.run("edgenoise.main:app", host="0.0.0.0", port=8000, reload=True)
