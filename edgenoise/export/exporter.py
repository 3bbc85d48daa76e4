import zipfile
import io
import json
from datetime import datetime

from edgenoise.core.types import NoiseRequest
from edgenoise.export.pcm import encode_raw, encode_wav
from edgenoise.generator import NoiseEngine
from edgenoise.qc.qc import analyze


def export_basename(request: NoiseRequest) -> str:
    """
    Traceable file stem: noise_gaussian_-80dBFS_48000Hz_9600smp.
    Informational only; the calling layer may name files however it likes.
    """
    level = int(round(request.target_level_dbfs))
    return (
        f"noise_{request.distribution.value}_{level}dBFS_"
        f"{request.sample_rate}Hz_{request.sample_count}smp"
    )


class Exporter:
    @staticmethod
    def create_bundle_zip(request: NoiseRequest) -> bytes:
        """
        Renders the request once and packs it as:
          <base>.wav, <base>.pcm, noise_info.json
        noise_info.json records the internal seed so unseeded renders can be repeated.
        """
        engine = NoiseEngine()
        audio = engine.render(request)
        base = export_basename(request)

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
            meta = {
                "name": base,
                "created_at": datetime.now().isoformat(),
                "request": request.to_dict(),
                "seed_state": engine.last_seed,
                "qc": analyze(
                    audio,
                    request.sample_rate,
                    request.target_level_dbfs,
                    zero_endpoints=request.zero_endpoints,
                    remove_dc=request.remove_dc,
                ),
            }
            zip_file.writestr("noise_info.json", json.dumps(meta, indent=2))
            zip_file.writestr(f"{base}.wav", encode_wav(audio, request.sample_rate))
            zip_file.writestr(f"{base}.pcm", encode_raw(audio, request.sample_rate))

        return buffer.getvalue()
