"""
End-to-end tests of the command line entry point.
"""

import re

import numpy as np
import pytest
from PIL import Image

from main import gather_inputs, main, parse_args
from utils.image_io import load_pixels
from utils.report import ComparisonPage, build_report


@pytest.fixture
def noisy_png(tmp_path):
    """Near-white image with a few darker specks."""
    rng = np.random.default_rng(3)
    pixels = rng.integers(246, 256, size=(24, 32, 3), dtype=np.uint8)
    pixels[5, 5] = (40, 40, 40)
    path = tmp_path / "input" / "scan.png"
    path.parent.mkdir()
    Image.fromarray(pixels).save(path)
    return path


class TestParseArgs:
    """Argument defaults."""

    def test_defaults(self):
        args = parse_args(["--input", "x.png"])
        assert args.output_dir == "outputs"
        assert args.white_threshold == 249
        assert args.max_side == 1400
        assert args.preset is None
        assert args.sensitivity is None
        assert not args.compare

    def test_gather_inputs_glob(self, tmp_path):
        for name in ("b.png", "a.jpg", "notes.txt"):
            (tmp_path / name).write_bytes(b"x")
        found = gather_inputs(str(tmp_path / "*"))
        assert [p.name for p in found] == ["a.jpg", "b.png"]


class TestMain:
    """Files written and exit codes."""

    def test_single_image(self, noisy_png, tmp_path):
        out = tmp_path / "out"
        assert main(["--input", str(noisy_png), "--output-dir", str(out)]) == 0

        rendered = load_pixels(out / "scan_noise.png")
        assert (rendered.width, rendered.height) == (32, 24)
        assert np.all(rendered.alpha == 255)
        assert (out / "noisemap.log").exists()

    def test_compare_heatmap_and_report(self, noisy_png, tmp_path):
        out = tmp_path / "out"
        code = main(
            [
                "--input", str(noisy_png),
                "--output-dir", str(out),
                "--preset", "strong",
                "--compare",
                "--cmap", "viridis",
                "--report",
            ]
        )
        assert code == 0
        for name in (
            "scan_noise.png",
            "scan_heatmap.png",
            "scan_cleaned.png",
            "scan_noise_before.png",
            "scan_noise_after.png",
            "report_scan.pdf",
        ):
            assert (out / name).exists(), name

        original = load_pixels(noisy_png)
        cleaned = load_pixels(out / "scan_cleaned.png")
        whitened = np.all(original.rgb >= 249, axis=2)
        assert tuple(cleaned.rgb[5, 5]) == (40, 40, 40)
        assert np.all(cleaned.rgb[whitened] == 255)
        assert np.array_equal(cleaned.rgb[~whitened], original.rgb[~whitened])

    def test_downscale_flag(self, noisy_png, tmp_path):
        out = tmp_path / "out"
        assert main(["--input", str(noisy_png), "--output-dir", str(out), "--max-side", "16"]) == 0
        rendered = load_pixels(out / "scan_noise.png")
        assert (rendered.width, rendered.height) == (16, 12)

    def test_no_match_returns_one(self, tmp_path):
        assert main(["--input", str(tmp_path / "*.png"), "--output-dir", str(tmp_path / "out")]) == 1

    def test_invalid_parameters_return_one(self, noisy_png, tmp_path):
        args = ["--input", str(noisy_png), "--output-dir", str(tmp_path / "out"), "--gamma", "0"]
        assert main(args) == 1

    def test_out_of_range_white_threshold_returns_one(self, noisy_png, tmp_path):
        out = tmp_path / "out"
        args = ["--input", str(noisy_png), "--output-dir", str(out), "--compare", "--white-threshold", "300"]
        assert main(args) == 1
        assert not (out / "scan_noise.png").exists()
        log_text = (out / "noisemap.log").read_text(encoding="utf-8")
        assert "Invalid white threshold 300" in log_text
        assert "Traceback" not in log_text

    def test_oversized_image_is_logged_and_skipped(self, noisy_png, tmp_path, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        out = tmp_path / "out"
        assert main(["--input", str(noisy_png), "--output-dir", str(out)]) == 2
        assert not (out / "scan_noise.png").exists()
        assert "Failed processing" in (out / "noisemap.log").read_text(encoding="utf-8")

    def test_failures_return_two_and_continue(self, noisy_png, tmp_path):
        (noisy_png.parent / "broken.png").write_bytes(b"garbage")
        out = tmp_path / "out"
        assert main(["--input", str(noisy_png.parent / "*.png"), "--output-dir", str(out)]) == 2
        assert (out / "scan_noise.png").exists()
        assert "Failed processing" in (out / "noisemap.log").read_text(encoding="utf-8")


class TestReport:
    """PDF assembly."""

    @pytest.fixture
    def map_png(self, tmp_path, random_buffer):
        image = tmp_path / "map.png"
        Image.fromarray(np.ascontiguousarray(random_buffer.pixels)).save(image)
        return image

    @staticmethod
    def page_count(pdf_path):
        return len(re.findall(rb"/Type\s*/Page\b", pdf_path.read_bytes()))

    def test_maps_only(self, tmp_path, map_png):
        pdf = build_report(
            tmp_path / "reports" / "r.pdf",
            {"File": "map.png", "Note": "non-latin ✓"},
            {"Sensitivity": "50"},
            [("Noise map", map_png, "caption")],
        )
        assert pdf.read_bytes().startswith(b"%PDF")
        assert self.page_count(pdf) == 2

    def test_comparison_pages(self, tmp_path, map_png):
        page = ComparisonPage(
            before_map=map_png,
            after_map=map_png,
            cleaned_image=map_png,
            metrics={"Noise mean": ("3.100", "0.000"), "Noise max": ("40", "0")},
            notes="12 pixels were set to white.",
        )
        pdf = build_report(tmp_path / "r.pdf", {"File": "map.png"}, {}, [], comparison=page)
        # title page, side-by-side page, whitened image page
        assert self.page_count(pdf) == 3
