"""日志工具。"""

from __future__ import annotations

import logging


def setup_logging(level: int = logging.WARNING) -> None:
    """初始化项目日志配置，日志统一写入标准错误。"""

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(processName)s] %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
