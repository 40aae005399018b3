"""项目内使用的自定义异常定义。"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """单文件失败的分类标签。"""

    NOT_FOUND = "NotFound"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    IO_ERROR = "IOError"
    INVALID_IMAGE = "InvalidImage"
    RESOURCE_EXHAUSTED = "ResourceExhausted"
    UNEXPECTED = "UnexpectedError"


class ColorizeBatchError(Exception):
    """基础异常类型。"""


class UsageError(ColorizeBatchError):
    """命令行参数不合法时抛出。"""


class SetupError(ColorizeBatchError):
    """批处理开始前的准备阶段失败（例如无法创建输出目录）。"""


class FileProcessingError(ColorizeBatchError):
    """单个文件处理失败，携带分类标签。"""

    category = ErrorCategory.UNEXPECTED

    def __init__(self, message: str, category: ErrorCategory | None = None) -> None:
        super().__init__(message)
        if category is not None:
            self.category = category


class InputNotFoundError(FileProcessingError):
    category = ErrorCategory.NOT_FOUND


class UnsupportedFormatError(FileProcessingError):
    category = ErrorCategory.UNSUPPORTED_FORMAT


class OutputWriteError(FileProcessingError):
    category = ErrorCategory.IO_ERROR


class InvalidImageError(FileProcessingError):
    category = ErrorCategory.INVALID_IMAGE


class ResourceExhaustedError(FileProcessingError):
    category = ErrorCategory.RESOURCE_EXHAUSTED
