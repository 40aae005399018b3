"""结果汇总输出：JSON、人类可读摘要与 CSV 报告。"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from colorize_batch.core.config import Options
from colorize_batch.core.models import BatchSummary, ProcessResult

LOGGER = logging.getLogger(__name__)

HEADER = [
    "input_path",
    "output_path",
    "success",
    "error_type",
    "error_message",
    "width",
    "height",
    "processing_time_seconds",
]


def exit_code_for(summary: BatchSummary) -> int:
    """全部成功时返回 0，否则返回 1。"""

    return 0 if summary.failed == 0 else 1


def format_duration(seconds: float) -> str:
    """将秒数格式化为 HH:MM:SS。"""

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def result_to_dict(result: ProcessResult) -> dict[str, Any]:
    record: dict[str, Any] = {
        "input": str(result.input_path),
        "output": str(result.output_path),
        "success": result.success,
    }
    if result.width and result.height:
        record["width"] = result.width
        record["height"] = result.height
    record["processing_time_seconds"] = round(result.elapsed_seconds, 3)
    if not result.success:
        record["error"] = result.error_message or ""
        if result.error_category is not None:
            record["error_type"] = result.error_category.value
    return record


def summary_to_dict(summary: BatchSummary) -> dict[str, Any]:
    return {
        "success": summary.failed == 0,
        "total": summary.total,
        "successful": summary.successful,
        "failed": summary.failed,
        "processing_time_seconds": round(summary.elapsed_seconds, 3),
        "results": [result_to_dict(result) for result in summary.results],
    }


def render_summary(summary: BatchSummary, options: Options, console: Optional[Console] = None) -> None:
    """按运行模式输出批处理汇总。

    JSON 模式只向标准输出写一行 JSON；quiet 模式不输出摘要。
    """

    if options.json_output:
        typer.echo(json.dumps(summary_to_dict(summary)))
        return

    if options.quiet:
        return

    console = console or Console(soft_wrap=True)
    if summary.total > 1:
        console.print(_build_table(summary))
    console.print(
        f"处理完成：成功 {summary.successful} 张，失败 {summary.failed} 张，"
        f"总耗时 {format_duration(summary.elapsed_seconds)}"
    )


def render_fatal_error(message: str, options: Options) -> None:
    """输出导致整批任务无法开始的错误。"""

    if options.json_output:
        typer.echo(json.dumps({"error": message}))
    else:
        typer.echo(f"错误: {message}", err=True)


def _build_table(summary: BatchSummary) -> Table:
    table = Table(title="处理结果")
    table.add_column("输入")
    table.add_column("输出")
    table.add_column("状态")
    table.add_column("尺寸", justify="right")
    table.add_column("耗时", justify="right")

    for result in summary.results:
        status = "[green]成功[/green]" if result.success else f"[red]{escape(result.error_category.value)}[/red]"
        size = f"{result.width}x{result.height}" if result.width and result.height else "-"
        table.add_row(
            escape(str(result.input_path)),
            escape(str(result.output_path)) if result.success else "-",
            status,
            size,
            f"{result.elapsed_seconds:.2f}s",
        )
    return table


def write_csv_report(results: Iterable[ProcessResult], report_path: Path) -> Path:
    """将处理结果写入 CSV 报告。"""

    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for record in results:
            writer.writerow(
                [
                    str(record.input_path),
                    str(record.output_path),
                    "true" if record.success else "false",
                    record.error_category.value if record.error_category else "",
                    record.error_message or "",
                    record.width or "",
                    record.height or "",
                    f"{record.elapsed_seconds:.3f}",
                ]
            )
    return report_path
