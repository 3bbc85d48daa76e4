#!/usr/bin/env python3
"""
Canonical renderer tool with debug outputs, fingerprinting, and param tracing.

Usage:
    python tools/render.py <subcommand> [options]

Subcommands:
    one-shot        Render a single padding-noise buffer (WAV and/or raw PCM)
    bundle          Render a zip bundle (WAV + PCM + noise_info.json)
    self-test       Run the built-in self tests; exit status 1 on any failure

Options (one-shot, bundle):
    --params-json <path>      Base params (engine names or camelCase aliases)
    --sample-rate <int>       Sample rate in Hz
    --samples <int>           Exact sample count (overrides --duration-ms)
    --duration-ms <float>     Length in ms
    --distribution <str>      gaussian | uniform
    --level <float>           Target RMS level in dBFS
    --seed <int|str>          Seed (default: random, recorded in output)
    --no-zero-endpoints       Skip endpoint detrending
    --no-dc-removal           Keep the mean
    --soften-edges            Damp samples 1 and N-2 by 0.7
    --output-dir <path>       Output directory (default: unique timestamped dir)
"""
import sys
import os
import json
import argparse
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tools.render_core import render_one_shot, get_unique_output_dir, FORMATS
from edgenoise.core.types import NoiseRequestError
from edgenoise.export.exporter import Exporter, export_basename
from edgenoise.params.resolve import build_request, resolve_params
from edgenoise.qc.selftest import run_self_tests


def _params_from_args(args) -> dict:
    """Params JSON (if any) overlaid with explicit flags."""
    if args.params_json:
        with open(args.params_json, "r") as f:
            params = json.load(f)
    else:
        params = {}
    overrides = {
        "sample_rate": args.sample_rate,
        "sample_count": args.samples,
        "duration_ms": args.duration_ms,
        "distribution": args.distribution,
        "target_level_dbfs": args.level,
        "seed": args.seed,
    }
    params.update({k: v for k, v in overrides.items() if v is not None})
    if args.no_zero_endpoints:
        params["zero_endpoints"] = False
    if args.no_dc_removal:
        params["remove_dc"] = False
    if args.soften_edges:
        params["soften_edges"] = True
    return params


def cmd_one_shot(args):
    """Render a single buffer."""
    params = _params_from_args(args)
    output_dir = Path(args.output_dir) if args.output_dir else get_unique_output_dir("one_shot")

    audio, debug_info = render_one_shot(
        params=params,
        output_dir=output_dir,
        filename=args.filename,
        fmt=args.format,
        debug=args.debug,
        qc=args.qc,
        script_name="render.py one-shot",
    )

    # Print summary
    print(f"\n=== Render Complete ===")
    for path in debug_info["output_paths"]:
        print(f"Output: {path}")
    print(f"Samples: {audio.numel()} @ {debug_info['request']['sample_rate']} Hz")
    print(f"Seed: {debug_info['seed']}")
    print(f"Fingerprint SHA256: {debug_info['fingerprint']['sha256'][:16]}...")
    print(f"Peak: {debug_info['fingerprint']['peak']:.3e}, RMS: {debug_info['fingerprint']['rms']:.3e}")

    if args.qc and debug_info.get("qc_result"):
        qc = debug_info["qc_result"]
        print(f"QC Status: {qc['status']}")
        if qc["failures"]:
            print("  FAILURES:")
            for f in qc["failures"]:
                print(f"    - {f}")
        if qc["warnings"]:
            print("  WARNINGS:")
            for w in qc["warnings"]:
                print(f"    - {w}")
        if qc["status"] == "FAIL":
            return 1

    return 0


def cmd_bundle(args):
    """Render a zip bundle."""
    request = build_request(resolve_params(_params_from_args(args)))
    output_dir = Path(args.output_dir) if args.output_dir else get_unique_output_dir("bundle")
    output_dir.mkdir(parents=True, exist_ok=True)
    zip_path = output_dir / f"{args.filename or export_basename(request)}.zip"
    zip_path.write_bytes(Exporter.create_bundle_zip(request))
    print(f"Bundle: {zip_path}")
    return 0


def cmd_self_test(args):
    """Run built-in self tests."""
    results = run_self_tests()
    for r in results:
        mark = "PASS" if r.passed else "FAIL"
        line = f"[{mark}] {r.name}"
        if r.message:
            line += f" :: {r.message}"
        print(line)
    failed = [r for r in results if not r.passed]
    print(f"\n{len(results) - len(failed)}/{len(results)} passed")
    return 1 if failed else 0


def _add_render_args(p):
    p.add_argument("--params-json", help="Params JSON file")
    p.add_argument("--sample-rate", type=int, help="Sample rate (Hz)")
    p.add_argument("--samples", type=int, help="Exact sample count")
    p.add_argument("--duration-ms", type=float, help="Length in ms")
    p.add_argument("--distribution", choices=["gaussian", "uniform"])
    p.add_argument("--level", type=float, help="Target RMS level (dBFS)")
    p.add_argument("--seed", help="Integer or string seed")
    p.add_argument("--no-zero-endpoints", action="store_true")
    p.add_argument("--no-dc-removal", action="store_true")
    p.add_argument("--soften-edges", action="store_true")
    p.add_argument("--output-dir", help="Output directory")
    p.add_argument("--filename", help="Base filename (default: traceable noise_* name)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Endpoint-constrained noise renderer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_one = subparsers.add_parser("one-shot", help="Render a single buffer")
    _add_render_args(p_one)
    p_one.add_argument("--format", choices=list(FORMATS), default="wav")
    p_one.add_argument("--debug", action="store_true", help="Save resolved.json")
    p_one.add_argument("--qc", action="store_true", help="Run QC analysis")
    p_one.set_defaults(func=cmd_one_shot)

    p_bundle = subparsers.add_parser("bundle", help="Render a zip bundle")
    _add_render_args(p_bundle)
    p_bundle.set_defaults(func=cmd_bundle)

    p_test = subparsers.add_parser("self-test", help="Run built-in self tests")
    p_test.set_defaults(func=cmd_self_test)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except NoiseRequestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
