"""测试命令行入口的调用形态、退出码与 JSON 输出。"""

from __future__ import annotations

import json
from pathlib import Path

from PIL import Image
from typer.testing import CliRunner

from colorize_batch.cli.main import app

runner = CliRunner()


def make_image(path: Path, size: tuple[int, int] = (48, 32)) -> Path:
    Image.new("L", size, 140).save(path)
    return path


def test_help_exits_successfully() -> None:
    result = runner.invoke(app, ["-h", "whatever.jpg", "-q"])

    assert result.exit_code == 0
    assert "--json" in result.output
    assert "--status" in result.output


def test_missing_inputs_is_usage_error() -> None:
    result = runner.invoke(app, ["--quiet"])

    assert result.exit_code == 1


def test_input_and_output_shape(tmp_path: Path) -> None:
    source = make_image(tmp_path / "a.jpg")
    target = tmp_path / "out.png"

    result = runner.invoke(app, [str(source), str(target), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["total"] == 1
    assert payload["results"][0]["output"] == str(target)
    with Image.open(target) as img:
        assert img.format == "PNG"


def test_two_existing_inputs_shape(tmp_path: Path) -> None:
    first = make_image(tmp_path / "a.jpg")
    second = make_image(tmp_path / "b.jpg")

    result = runner.invoke(app, [str(first), str(second), "-j"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["total"] == 2
    assert [r["input"] for r in payload["results"]] == [str(first), str(second)]
    assert (tmp_path / "a-colorized.jpg").exists()
    assert (tmp_path / "b-colorized.jpg").exists()


def test_any_failure_sets_exit_code(tmp_path: Path) -> None:
    good = make_image(tmp_path / "good.png")

    result = runner.invoke(app, [str(good), str(tmp_path / "x.png"), str(tmp_path / "y.png"), "--json"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["success"] is False
    assert (payload["successful"], payload["failed"]) == (1, 2)


def test_output_dir_option(tmp_path: Path) -> None:
    source = make_image(tmp_path / "scan.tif")
    out_dir = tmp_path / "results" / "today"

    result = runner.invoke(app, [str(source), "-o", str(out_dir), "-q"])

    assert result.exit_code == 0
    assert (out_dir / "scan-colorized.tif").exists()
    assert result.stdout.startswith("OK ")


def test_uncreatable_output_dir_in_json_mode(tmp_path: Path) -> None:
    source = make_image(tmp_path / "scan.png")
    blocker = tmp_path / "blocker"
    blocker.write_text("file")

    result = runner.invoke(app, [str(source), "-o", str(blocker / "out"), "--json"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert list(payload) == ["error"]


def test_status_file_removed_after_batch(tmp_path: Path) -> None:
    source = make_image(tmp_path / "scan.png")
    status = tmp_path / "status.txt"

    result = runner.invoke(app, [str(source), "--status", str(status), "--json"])

    assert result.exit_code == 0
    assert not status.exists()


def test_human_output_and_report(tmp_path: Path) -> None:
    source = make_image(tmp_path / "scan.png")
    report = tmp_path / "report.csv"

    result = runner.invoke(app, [str(source), "--report", str(report)])

    assert result.exit_code == 0
    assert "处理完成" in result.stdout
    assert report.exists()


def test_unknown_option_is_treated_as_path(tmp_path: Path) -> None:
    source = make_image(tmp_path / "a.png")

    result = runner.invoke(app, [str(source), "--bogus", "-j"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["total"] == 1
    assert payload["results"][0]["output"] == "--bogus"
    assert payload["results"][0]["error_type"] == "UnsupportedFormat"


def test_unknown_options_in_a_batch_keep_their_position(tmp_path: Path) -> None:
    first = make_image(tmp_path / "a.png")
    second = make_image(tmp_path / "b.png")

    result = runner.invoke(app, [str(first), "-x", str(second), "--json"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert [r["input"] for r in payload["results"]] == [str(first), "-x", str(second)]
    assert [r["success"] for r in payload["results"]] == [True, False, True]
    assert payload["results"][1]["error_type"] == "NotFound"


def test_missing_option_value_exits_with_one(tmp_path: Path) -> None:
    source = make_image(tmp_path / "a.png")

    result = runner.invoke(app, [str(source), "-o"])

    assert result.exit_code == 1
    assert not (tmp_path / "a-colorized.png").exists()


def test_missing_option_value_in_json_mode(tmp_path: Path) -> None:
    source = make_image(tmp_path / "a.png")

    result = runner.invoke(app, [str(source), "-j", "--status"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert list(payload) == ["error"]


def test_help_flag_after_first_token_is_an_input(tmp_path: Path) -> None:
    first = make_image(tmp_path / "a.png")
    second = make_image(tmp_path / "b.png")

    result = runner.invoke(app, [str(first), str(second), "-h", "-j"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["total"] == 3
    assert payload["results"][2]["input"] == "-h"
    assert payload["results"][2]["error_type"] == "NotFound"
