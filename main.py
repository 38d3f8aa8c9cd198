# ================================================================
# PROJECT: NOISEMAP - LOCAL NOISE VISUALIZER
#
# FILE: MAIN.PY - COMMAND LINE ENTRY POINT
# DESCRIPTION: CONFIGURES LOGGING, LOADS IMAGES AND EXPORTS NOISE MAPS
# ================================================================
from __future__ import annotations

import argparse
import glob
import logging
from pathlib import Path
from time import perf_counter
from typing import Dict, List, Optional, Sequence, Tuple

from noisemap import (
    DEFAULT_WHITE_THRESHOLD,
    NoiseMapError,
    VisualizationParameters,
    analyze,
    compare,
    save_heatmap,
)
from utils.image_io import MAX_SIDE, describe_image, load_pixels, save_pixels, validate_image_path
from utils.logging_utils import configure_logging, log
from utils.presets import PRESETS_BY_NAME, build_parameters
from utils.report import ComparisonPage, build_report

ReportImage = Tuple[str, Path, str]


# ================================================================
# FUNCTION PARSE_ARGS: DECLARES THE COMMAND LINE SURFACE
# ================================================================
def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render local noise maps of images.")
    parser.add_argument(
        "--input",
        required=True,
        help="File path or glob pattern (e.g. photos/*.png).",
    )
    parser.add_argument(
        "--output-dir",
        default="outputs",
        help="Directory for generated maps, reports and the log file.",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS_BY_NAME),
        default=None,
        help="Named visualization preset; explicit flags override it.",
    )
    parser.add_argument("--sensitivity", type=float, default=None, help="0-100, higher shows more noise.")
    parser.add_argument("--gain", type=float, default=None, help="Multiplicative boost after gamma.")
    parser.add_argument("--gamma", type=float, default=None, help="Contrast exponent applied to noise.")
    parser.add_argument("--threshold-max", type=float, default=None, help="Threshold at sensitivity 0.")
    parser.add_argument(
        "--white-threshold",
        type=int,
        default=DEFAULT_WHITE_THRESHOLD,
        help="Channel level from which pixels are whitened in --compare.",
    )
    parser.add_argument(
        "--max-side",
        type=int,
        default=MAX_SIDE,
        help="Downscale so the longest side is at most this many pixels (0 disables).",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Also whiten the image and export before/after noise maps.",
    )
    parser.add_argument(
        "--cmap",
        default=None,
        help="Additionally save a colormapped heatmap (matplotlib colormap name).",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Write a PDF report per image.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser.parse_args(argv)


# ================================================================
# FUNCTION GATHER_INPUTS: RESOLVES A PATH OR GLOB INTO IMAGE FILES
# ================================================================
def gather_inputs(pattern: str) -> List[Path]:
    candidate = Path(pattern)
    if candidate.is_file():
        return [candidate]
    matches = [Path(p) for p in glob.glob(pattern)]
    return sorted(p for p in matches if validate_image_path(p))


# ================================================================
# FUNCTION PROCESS_FILE: RUNS THE NOISE STAGES FOR ONE IMAGE
# ================================================================
def process_file(
    path: Path,
    output_dir: Path,
    params: VisualizationParameters,
    logger: logging.Logger,
    compare_flag: bool = False,
    white_threshold: int = DEFAULT_WHITE_THRESHOLD,
    max_side: Optional[int] = MAX_SIDE,
    cmap: Optional[str] = None,
    report_flag: bool = False,
) -> List[Path]:
    start = perf_counter()
    buffer = load_pixels(path, max_side=max_side)
    base = path.stem
    written: List[Path] = []
    maps: List[ReportImage] = []
    comparison_page: Optional[ComparisonPage] = None
    settings: Dict[str, str] = {
        "Analysed size": f"{buffer.width} x {buffer.height}",
        "Sensitivity": f"{params.sensitivity:g} (threshold {params.threshold:.3f})",
        "Gain / gamma": f"{params.gain:g} / {params.gamma:g}",
    }

    analysis = analyze(buffer, params)
    noise_path = save_pixels(output_dir / f"{base}_noise.png", analysis.rendered)
    written.append(noise_path)
    summary = analysis.summary()
    caption = ", ".join(f"{k} {v}" for k, v in summary.as_dict().items())
    maps.append(("Noise map", noise_path, f"Noise {caption}."))
    log(logger, f"{path.name}: mean noise {summary.mean:.3f}, max {summary.maximum}")

    if cmap:
        heatmap_path = save_heatmap(analysis.noise, output_dir / f"{base}_heatmap.png", params, cmap=cmap)
        written.append(heatmap_path)
        maps.append(("Heatmap", heatmap_path, f"Colormap: {cmap}"))

    if compare_flag:
        comparison = compare(buffer, params, white_threshold=white_threshold)
        cleaned_path = save_pixels(output_dir / f"{base}_cleaned.png", comparison.cleaned)
        before_path = save_pixels(output_dir / f"{base}_noise_before.png", comparison.before.rendered)
        after_path = save_pixels(output_dir / f"{base}_noise_after.png", comparison.after.rendered)
        written.extend([cleaned_path, before_path, after_path])
        settings["White threshold"] = str(white_threshold)
        before_stats = comparison.before.summary().as_dict()
        after_stats = comparison.after.summary().as_dict()
        comparison_page = ComparisonPage(
            before_map=before_path,
            after_map=after_path,
            cleaned_image=cleaned_path,
            metrics={f"Noise {k}": (before_stats[k], after_stats[k]) for k in before_stats},
            notes=(
                f"{comparison.changed_pixels} pixels with R, G, B >= {white_threshold} were set to white; "
                f"mean noise dropped by {comparison.mean_reduction:.3f}. Both maps use full sensitivity."
            ),
        )
        log(
            logger,
            f"{path.name}: whitened {comparison.changed_pixels} pixels, "
            f"mean noise reduced by {comparison.mean_reduction:.3f}",
        )

    if report_flag:
        source = {"File": path.name}
        source.update(describe_image(path))
        report_path = build_report(
            output_dir / f"report_{base}.pdf", source, settings, maps, comparison=comparison_page
        )
        written.append(report_path)
        log(logger, f"Report written to {report_path}")

    log(logger, f"Processed {path.name} in {perf_counter() - start:.2f}s.")
    return written


# ================================================================
# FUNCTION MAIN: PARSES ARGUMENTS AND PROCESSES EVERY INPUT
# ================================================================
def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    output_dir = Path(args.output_dir)
    logger = configure_logging(output_dir, level=args.log_level)

    try:
        params = build_parameters(
            args.preset,
            sensitivity=args.sensitivity,
            gain=args.gain,
            gamma=args.gamma,
            threshold_max=args.threshold_max,
        )
    except NoiseMapError as exc:
        log(logger, f"Invalid visualization parameters: {exc}", level="error")
        return 1

    if not 0 <= args.white_threshold <= 255:
        log(logger, f"Invalid white threshold {args.white_threshold}: expected 0-255.", level="error")
        return 1

    input_paths = gather_inputs(args.input)
    if not input_paths:
        log(logger, f"No files matched the pattern: {args.input}", level="error")
        return 1

    total_start = perf_counter()
    success = True
    for path in input_paths:
        try:
            process_file(
                path,
                output_dir,
                params,
                logger,
                compare_flag=args.compare,
                white_threshold=args.white_threshold,
                max_side=args.max_side,
                cmap=args.cmap,
                report_flag=args.report,
            )
        except (NoiseMapError, OSError) as exc:
            logger.exception("Failed processing %s: %s", path, exc)
            success = False
    log(logger, f"Completed processing in {perf_counter() - total_start:.2f}s.")
    return 0 if success else 2


# =======================================================
# MAIN BLOCK: EXITS WITH THE PROCESSING STATUS
# =======================================================
if __name__ == "__main__":
    raise SystemExit(main())
