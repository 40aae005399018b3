"""批处理任务的配置模型。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True, slots=True)
class Options:
    """命令行解析后得到的运行选项，构造后不可修改。"""

    quiet: bool = False
    json_output: bool = False
    status_file: Optional[Path] = None
    output_dir: Optional[Path] = None
    verbose: bool = False
    report_path: Optional[Path] = None

    def __post_init__(self) -> None:
        # JSON 模式隐含 quiet。
        if self.json_output and not self.quiet:
            object.__setattr__(self, "quiet", True)
