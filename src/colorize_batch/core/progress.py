"""进度信号桥接、状态文件与控制台反馈。"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn

from colorize_batch.core.config import Options
from colorize_batch.core.models import ProcessResult

LOGGER = logging.getLogger(__name__)

# 每跨过一个十分位才输出一次进度。
PROGRESS_STEP = 10

STATUS_LOADING = "loading"
STATUS_PROCESSING = "processing"
STATUS_SAVING = "saving"
STATUS_COMPLETE = "complete"

ProgressCallback = Callable[[float], None]


class StatusFile:
    """供外部进程轮询的状态文件。

    每次写入都完整覆盖文件内容；写入和删除都只尝试一次，失败时忽略，
    状态上报不能中断或拖慢上色流程。
    """

    def __init__(self, path: Optional[Path]) -> None:
        self.path = path

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def write(self, status: str) -> None:
        if self.path is None:
            return
        try:
            self.path.write_text(status, encoding="utf-8")
        except OSError as exc:
            LOGGER.debug("写入状态文件失败 %s: %s", self.path, exc)

    def remove(self) -> None:
        if self.path is None:
            return
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.debug("删除状态文件失败 %s: %s", self.path, exc)


class ProgressBridge:
    """将上色引擎的百分比回调节流后转发到控制台与状态文件。

    每个实例只服务一次 ``colorize`` 调用，不在文件之间共享。
    """

    def __init__(
        self,
        status_file: Optional[StatusFile] = None,
        on_update: Optional[Callable[[int], None]] = None,
        step: int = PROGRESS_STEP,
    ) -> None:
        self.status_file = status_file
        self.on_update = on_update
        self.step = step
        self.last_emitted: Optional[int] = None

    def __call__(self, percent: float) -> None:
        current = int(math.floor(max(0.0, min(float(percent), 100.0))))
        if current == self.last_emitted or current % self.step != 0:
            return
        self.last_emitted = current

        if self.status_file is not None:
            self.status_file.write(f"{STATUS_PROCESSING}:{current}")
        if self.on_update is not None:
            self.on_update(current)


class ConsoleFeedback:
    """按运行模式输出逐文件的人类可读信息。

    普通模式输出完整步骤；quiet 模式每个文件只输出一行；JSON 模式完全静默。
    """

    def __init__(self, options: Options, console: Optional[Console] = None) -> None:
        self.verbose = not options.quiet
        self.compact = options.quiet and not options.json_output
        self.console = console
        self.progress_bar: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def batch_item(self, index: int, total: int, input_path: Path) -> None:
        if self.verbose and total > 1:
            typer.echo(f"[{index}/{total}] {input_path}")

    def info(self, message: str) -> None:
        if self.verbose:
            typer.echo(message)

    def warning(self, message: str) -> None:
        if self.verbose:
            typer.echo(f"警告: {message}")

    def progress(self, percent: int) -> None:
        if not self.verbose:
            return
        if self.progress_bar is None:
            # transient：上色结束后清除进度行，只保留逐步骤的文字输出。
            self.progress_bar = Progress(
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                TextColumn("{task.percentage:>3.0f}%"),
                TimeElapsedColumn(),
                console=self.console,
                transient=True,
            )
            self.progress_bar.start()
            self._task_id = self.progress_bar.add_task("上色进度", total=100)
        self.progress_bar.update(self._task_id, completed=percent)

    def end_progress(self) -> None:
        if self.progress_bar is not None:
            self.progress_bar.stop()
            self.progress_bar = None
            self._task_id = None

    def file_result(self, result: ProcessResult) -> None:
        """输出单个文件的最终结果。"""

        self.end_progress()
        if self.verbose:
            if result.success:
                typer.echo(f"完成！输出已保存到: {result.output_path}")
            else:
                typer.echo(f"错误 [{result.error_category.value}]: {result.error_message}")
        elif self.compact:
            if result.success:
                typer.echo(f"OK {result.input_path} -> {result.output_path}")
            else:
                typer.echo(f"FAIL {result.input_path}: {result.error_message}")
