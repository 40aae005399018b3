"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from typer.core import TyperCommand

from colorize_batch.core.arguments import parse_arguments
from colorize_batch.core.config import Options
from colorize_batch.core.exceptions import SetupError, UsageError
from colorize_batch.core.progress import ConsoleFeedback, StatusFile
from colorize_batch.core.report import (
    exit_code_for,
    render_fatal_error,
    render_summary,
    write_csv_report,
)
from colorize_batch.processing.colorizer import ToneColorizer
from colorize_batch.processing.file_processor import FileProcessor
from colorize_batch.processing.image_codec import SUPPORTED_FORMAT_NAMES, PillowImageCodec
from colorize_batch.processing.pipeline import run_batch
from colorize_batch.utils.logging import setup_logging

LOGGER = logging.getLogger(__name__)

EPILOG = (
    f"支持的格式（输入/输出）：{SUPPORTED_FORMAT_NAMES}\n\n"
    "示例：\n\n"
    "  colorize-batch input.jpg\n\n"
    "  colorize-batch input.jpg output.png\n\n"
    "  colorize-batch a.jpg b.png c.tif -o colorized/ --json\n\n"
    "未指定输出时保存为 <输入名>-colorized.<扩展名>，已存在则追加 -1、-2 ……"
)

# typer 的新旧版本中 BadParameter 都直接继承自参数解析阶段的 UsageError。
ParameterUsageError = typer.BadParameter.__base__

_JSON_FLAGS = {"-j", "--json"}


class ColorizeCommand(TyperCommand):
    """只在第一个参数为帮助选项时显示帮助，参数错误统一以退出码 1 结束。"""

    def parse_args(self, ctx: typer.Context, args: List[str]) -> List[str]:
        help_names = ctx.help_option_names
        if args and args[0] not in help_names:
            # 其余位置的 -h/--help 与其他未知参数一样视为输入路径。
            ctx.help_option_names = []
        try:
            return super().parse_args(ctx, args)
        except ParameterUsageError as exc:
            if _wants_json(args):
                render_fatal_error(exc.format_message(), Options(json_output=True))
                raise typer.Exit(code=1) from exc
            exc.exit_code = 1
            raise
        finally:
            ctx.help_option_names = help_names


def _wants_json(args: List[str]) -> bool:
    for token in args:
        if token in _JSON_FLAGS:
            return True
        # 合并的短选项，例如 -qj
        if token.startswith("-") and not token.startswith("--"):
            letters = set(token[1:])
            if "j" in letters and letters <= {"q", "j", "v"}:
                return True
    return False


app = typer.Typer(
    help="批量黑白照片上色工具。",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"], "ignore_unknown_options": True},
)


@app.command("run", cls=ColorizeCommand, epilog=EPILOG)
def run_cli(  # noqa: PLR0913
    ctx: typer.Context,
    inputs: Optional[List[Path]] = typer.Argument(
        None,
        help="输入的黑白图片，可指定多个；单个输入后跟一个不存在的路径时视为输出文件",
        show_default=False,
    ),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="输出目录，不存在时自动创建"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="每个文件只输出一行结果"),
    json_output: bool = typer.Option(False, "--json", "-j", help="以单行 JSON 输出结果（隐含 --quiet）"),
    status_file: Optional[Path] = typer.Option(None, "--status", help="供外部进程轮询的状态文件"),
    report: Optional[Path] = typer.Option(None, "--report", help="额外写出 CSV 报告"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """为一个或多个黑白图片上色。"""

    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        parsed = parse_arguments(
            inputs or [],
            output_dir=output_dir,
            quiet=quiet,
            json_output=json_output,
            status_file=status_file,
            verbose=verbose,
            report_path=report,
        )
    except UsageError as exc:
        if json_output:
            render_fatal_error(str(exc), Options(json_output=True))
        else:
            typer.echo(f"错误: {exc}", err=True)
            typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(code=1) from exc
    except SetupError as exc:
        render_fatal_error(str(exc), Options(json_output=json_output))
        raise typer.Exit(code=1) from exc

    options = parsed.options
    LOGGER.debug("CLI 参数解析完成：%d 个任务", len(parsed.jobs))

    feedback = ConsoleFeedback(options)
    status = StatusFile(options.status_file)
    processor = FileProcessor(ToneColorizer(), PillowImageCodec(), feedback, status)

    try:
        summary = run_batch(parsed.jobs, options, processor, feedback)
    finally:
        status.remove()

    render_summary(summary, options)

    if options.report_path is not None:
        try:
            write_csv_report(summary.results, options.report_path)
        except OSError as exc:
            LOGGER.error("写入报告失败：%s", exc)

    raise typer.Exit(code=exit_code_for(summary))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
