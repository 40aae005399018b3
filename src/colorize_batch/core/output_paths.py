"""默认输出路径推导与重名规避。"""

from __future__ import annotations

import logging
from itertools import count
from pathlib import Path
from typing import Optional

LOGGER = logging.getLogger(__name__)

OUTPUT_SUFFIX = "-colorized"


def resolve_output_path(input_path: Path, output_dir: Optional[Path] = None) -> Path:
    """为输入文件推导一个当前不存在的输出路径。

    基准目录依次取 ``output_dir``、输入文件所在目录、当前目录；扩展名保持不变。
    若 ``stem-colorized.ext`` 已存在，则依次尝试 ``stem-colorized-1.ext``、
    ``stem-colorized-2.ext`` ……，返回第一个不存在的路径。本函数只探测，不创建任何文件。
    """

    # Path("photo.jpg").parent 即为 Path(".")
    base_dir = output_dir if output_dir is not None else input_path.parent

    stem = input_path.stem
    suffix = input_path.suffix

    candidate = base_dir / f"{stem}{OUTPUT_SUFFIX}{suffix}"
    if not candidate.exists():
        return candidate

    for idx in count(1):
        candidate = base_dir / f"{stem}{OUTPUT_SUFFIX}-{idx}{suffix}"
        if not candidate.exists():
            LOGGER.debug("默认输出已存在，改用 %s", candidate.name)
            return candidate

    # 理论上不会执行到此处
    return candidate
