"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from colorize_batch.core.exceptions import ErrorCategory


@dataclass(frozen=True, slots=True)
class Job:
    """单个待处理的输入文件。

    ``output_path`` 仅在单文件模式下由用户显式给出。
    """

    input_path: Path
    output_path: Optional[Path] = None


@dataclass(slots=True)
class ProcessResult:
    """记录单个文件的处理结果（用于报告/日志）。"""

    input_path: Path
    output_path: Path
    success: bool = False
    error_category: Optional[ErrorCategory] = None
    error_message: Optional[str] = None
    width: int = 0
    height: int = 0
    elapsed_seconds: float = 0.0

    def mark_failed(self, category: ErrorCategory, message: str) -> None:
        self.success = False
        self.error_category = category
        self.error_message = message


@dataclass(slots=True)
class BatchSummary:
    """整批任务完成后的汇总结果。"""

    results: list[ProcessResult] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    def failures(self) -> list[ProcessResult]:
        """返回失败的结果记录，保持原有顺序。"""

        return [result for result in self.results if not result.success]
