"""命令行参数到任务列表的解释逻辑。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from colorize_batch.core.config import Options
from colorize_batch.core.exceptions import SetupError, UsageError
from colorize_batch.core.models import Job

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ParsedArguments:
    """解析结果：运行选项与按输入顺序排列的任务。"""

    options: Options
    jobs: list[Job]


def parse_arguments(
    inputs: Sequence[Path],
    *,
    output_dir: Optional[Path] = None,
    quiet: bool = False,
    json_output: bool = False,
    status_file: Optional[Path] = None,
    verbose: bool = False,
    report_path: Optional[Path] = None,
) -> ParsedArguments:
    """将位置参数与选项解释为 ``Options`` 和任务列表。

    恰好两个位置参数且未指定输出目录时，若第二个路径在磁盘上不存在，
    则把它视为单文件模式的显式输出路径；否则两者都作为输入文件。
    """

    candidates = list(inputs)
    explicit_output: Optional[Path] = None

    if len(candidates) == 2 and output_dir is None and not candidates[1].exists():
        explicit_output = candidates.pop()
        LOGGER.debug("单文件模式，显式输出路径: %s", explicit_output)

    if not candidates:
        raise UsageError("缺少必需的输入文件参数。")

    options = Options(
        quiet=quiet,
        json_output=json_output,
        status_file=status_file,
        output_dir=output_dir,
        verbose=verbose,
        report_path=report_path,
    )

    if output_dir is not None:
        _prepare_output_dir(output_dir)

    if explicit_output is not None:
        jobs = [Job(input_path=candidates[0], output_path=explicit_output)]
    else:
        jobs = [Job(input_path=path) for path in candidates]

    return ParsedArguments(options=options, jobs=jobs)


def _prepare_output_dir(output_dir: Path) -> None:
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SetupError(f"无法创建输出目录: {output_dir} ({exc})") from exc
