"""
Tests for page_stitcher.cli

Test Coverage:
- stitch: artifact written to --output-dir, trailer appended
- render / convert: PDF rendered and stitched
- Exit codes for pipeline errors, storage errors and invalid options
- Retention options: only old artifacts are swept
"""

import os
import time

import pytest
import fitz
from PIL import Image

from page_stitcher import cli
from page_stitcher.cli import main


@pytest.fixture(autouse=True)
def isolated_scratch(tmp_path, monkeypatch):
    monkeypatch.setenv("PAGE_STITCHER_SCRATCH_DIR", str(tmp_path / "scratch"))
    monkeypatch.setenv("PAGE_STITCHER_OUTPUT_DIR", str(tmp_path / "default-output"))


def test_stitch_writes_artifact(make_image, tmp_path, capsys):
    a = make_image("page-001.png", size=(30, 40))
    b = make_image("page-002.png", size=(30, 60))
    out = tmp_path / "out"

    code = main(["stitch", str(a), str(b), "--output-dir", str(out), "--request-id", "cli1"])

    assert code == 0
    artifact = out / "stitched-cli1.png"
    with Image.open(artifact) as img:
        assert img.size == (30, 100)
    assert "Quality: 90" in capsys.readouterr().out


def test_stitch_with_trailer_and_format(make_image, tmp_path):
    page = make_image("page-001.png", size=(30, 40))
    trailer = make_image("footer.png", size=(20, 10))

    code = main([
        "stitch", str(page),
        "--trailer", str(trailer),
        "--format", "jpeg",
        "--output-dir", str(tmp_path / "out"),
        "--request-id", "cli2",
    ])

    assert code == 0
    with Image.open(tmp_path / "out" / "stitched-cli2.jpg") as img:
        assert img.size == (30, 50)


def test_default_output_dir_comes_from_environment(make_image, tmp_path):
    page = make_image("page-001.png")
    assert main(["stitch", str(page), "--request-id", "cli3"]) == 0
    assert (tmp_path / "default-output" / "stitched-cli3.png").exists()


def test_missing_image_exits_1(tmp_path):
    assert main(["stitch", str(tmp_path / "missing.png"), "--output-dir", str(tmp_path / "out")]) == 1


def test_invalid_quality_range_is_usage_error(make_image):
    page = make_image("page-001.png")
    with pytest.raises(SystemExit) as exc_info:
        main(["stitch", str(page), "--quality", "40", "--min-quality", "60"])
    assert exc_info.value.code == 2


def test_render_and_convert(tmp_path):
    pdf_path = tmp_path / "doc.pdf"
    doc = fitz.open()
    for _ in range(2):
        doc.new_page(width=100, height=150)
    doc.save(str(pdf_path))
    doc.close()

    assert main(["render", str(pdf_path), "-o", str(tmp_path / "pages")]) == 0
    assert sorted(p.name for p in (tmp_path / "pages").iterdir()) == ["page-001.png", "page-002.png"]

    code = main([
        "convert", str(pdf_path),
        "--scale", "1",
        "--output-dir", str(tmp_path / "out"),
        "--request-id", "cli4",
    ])

    assert code == 0
    with Image.open(tmp_path / "out" / "stitched-cli4.png") as img:
        assert img.size == (100, 300)
    assert list((tmp_path / "scratch").iterdir()) == []


def test_unwritable_output_dir_exits_1(make_image, tmp_path):
    page = make_image("page-001.png")
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")

    assert main(["stitch", str(page), "--output-dir", str(blocker / "sub")]) == 1


def test_stitch_leaves_unrelated_old_files_in_output_dir(make_image, tmp_path):
    out = tmp_path / "shared"
    out.mkdir()
    thesis = out / "thesis.docx"
    thesis.write_bytes(b"draft")
    stale = out / "stitched-stale.png"
    stale.write_bytes(b"old")
    old = time.time() - 30 * 24 * 3600
    for path in (thesis, stale):
        os.utime(path, (old, old))

    assert main(["stitch", str(make_image("page-001.png")), "--output-dir", str(out)]) == 0

    assert thesis.exists()
    assert not stale.exists()


def test_keep_hours_controls_sweep_age(make_image, tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    stale = out / "stitched-stale.png"
    stale.write_bytes(b"old")
    three_hours_ago = time.time() - 3 * 3600
    os.utime(stale, (three_hours_ago, three_hours_ago))
    page = str(make_image("page-001.png"))

    assert main(["stitch", page, "--output-dir", str(out), "--keep-hours", "4"]) == 0
    assert stale.exists()

    assert main(["stitch", page, "--output-dir", str(out), "--no-sweep", "--keep-hours", "1"]) == 0
    assert stale.exists()

    assert main(["stitch", page, "--output-dir", str(out), "--keep-hours", "1"]) == 0
    assert not stale.exists()


def test_runtime_value_error_is_not_a_usage_error(make_image, monkeypatch):
    def broken_stitch(*args, **kwargs):
        raise ValueError("decoder exploded")

    monkeypatch.setattr(cli, "stitch_pages", broken_stitch)

    with pytest.raises(ValueError, match="decoder exploded"):
        main(["stitch", str(make_image("page-001.png"))])


def test_invalid_render_option_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main(["render", str(tmp_path / "doc.pdf"), "-o", str(tmp_path / "pages"), "--scale", "0"])
    assert exc_info.value.code == 2
