"""测试参数解释与默认输出路径推导。"""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from colorize_batch.core.arguments import parse_arguments
from colorize_batch.core.config import Options
from colorize_batch.core.exceptions import SetupError, UsageError
from colorize_batch.core.output_paths import resolve_output_path


def make_image(path: Path, size: tuple[int, int] = (32, 32)) -> Path:
    Image.new("L", size, 128).save(path)
    return path


def test_two_existing_inputs_form_a_batch(tmp_path: Path) -> None:
    first = make_image(tmp_path / "a.jpg")
    second = make_image(tmp_path / "b.jpg")

    parsed = parse_arguments([first, second])

    assert [job.input_path for job in parsed.jobs] == [first, second]
    assert all(job.output_path is None for job in parsed.jobs)


def test_missing_second_path_becomes_explicit_output(tmp_path: Path) -> None:
    source = make_image(tmp_path / "a.jpg")
    target = tmp_path / "out.png"

    parsed = parse_arguments([source, target])

    assert len(parsed.jobs) == 1
    assert parsed.jobs[0].input_path == source
    assert parsed.jobs[0].output_path == target


def test_output_dir_disables_output_reinterpretation(tmp_path: Path) -> None:
    source = make_image(tmp_path / "a.jpg")
    missing = tmp_path / "missing.png"

    parsed = parse_arguments([source, missing], output_dir=tmp_path / "out")

    assert [job.input_path for job in parsed.jobs] == [source, missing]
    assert (tmp_path / "out").is_dir()


def test_three_candidates_are_all_inputs(tmp_path: Path) -> None:
    paths = [make_image(tmp_path / "a.png"), make_image(tmp_path / "b.png"), tmp_path / "c.png"]

    parsed = parse_arguments(paths)

    assert [job.input_path for job in parsed.jobs] == paths


def test_no_inputs_is_a_usage_error() -> None:
    with pytest.raises(UsageError):
        parse_arguments([])


def test_uncreatable_output_dir_is_fatal(tmp_path: Path) -> None:
    source = make_image(tmp_path / "a.jpg")
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(SetupError):
        parse_arguments([source], output_dir=blocker / "sub")


def test_json_implies_quiet() -> None:
    options = Options(json_output=True)

    assert options.quiet is True
    assert Options().quiet is False


def test_resolve_uses_input_directory(tmp_path: Path) -> None:
    assert resolve_output_path(tmp_path / "x.jpg") == tmp_path / "x-colorized.jpg"


def test_resolve_relative_input_without_directory() -> None:
    assert resolve_output_path(Path("photo.TIF")) == Path("photo-colorized.TIF")


def test_resolve_skips_existing_candidates(tmp_path: Path) -> None:
    (tmp_path / "x-colorized.jpg").write_bytes(b"")
    (tmp_path / "x-colorized-1.jpg").write_bytes(b"")

    resolved = resolve_output_path(tmp_path / "x.jpg")

    assert resolved == tmp_path / "x-colorized-2.jpg"
    assert not resolved.exists()


def test_resolve_with_output_dir_override(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / "scan-colorized.png").write_bytes(b"")

    resolved = resolve_output_path(tmp_path / "in" / "scan.png", out_dir)

    assert resolved == out_dir / "scan-colorized-1.png"
    assert not (tmp_path / "in").exists()
