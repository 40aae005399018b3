"""单个文件的完整处理流程：校验、解码、上色、编码。"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Optional

from PIL import Image

from colorize_batch.core.config import Options
from colorize_batch.core.exceptions import (
    ErrorCategory,
    FileProcessingError,
    InputNotFoundError,
    OutputWriteError,
    ResourceExhaustedError,
    UnsupportedFormatError,
)
from colorize_batch.core.models import ProcessResult
from colorize_batch.core.progress import (
    STATUS_COMPLETE,
    STATUS_LOADING,
    STATUS_PROCESSING,
    STATUS_SAVING,
    ConsoleFeedback,
    ProgressBridge,
    StatusFile,
)
from colorize_batch.processing.colorizer import Colorizer
from colorize_batch.processing.image_codec import (
    SUPPORTED_FORMAT_NAMES,
    ImageCodec,
    format_for_path,
)

LOGGER = logging.getLogger(__name__)

MIN_RECOMMENDED_SIZE = 10
MAX_RECOMMENDED_SIZE = 4096


class FileProcessor:
    """对单个输入文件执行上色流程，所有失败都记录在返回的结果中。"""

    def __init__(
        self,
        colorizer: Colorizer,
        codec: ImageCodec,
        feedback: Optional[ConsoleFeedback] = None,
        status_file: Optional[StatusFile] = None,
    ) -> None:
        self.colorizer = colorizer
        self.codec = codec
        self.feedback = feedback or ConsoleFeedback(Options(json_output=True))
        self.status_file = status_file or StatusFile(None)

    def process(self, input_path: Path, output_path: Path) -> ProcessResult:
        """处理单个文件，永不向外抛出异常。"""

        result = ProcessResult(input_path=input_path, output_path=output_path)
        started = time.perf_counter()
        image: Optional[Image.Image] = None
        colorized: Optional[Image.Image] = None

        try:
            format_tag = _validate_paths(input_path, output_path)
            _ensure_output_dir(output_path)

            image = self._load(input_path)
            result.width, result.height = image.size
            self._check_dimensions(image)

            colorized = self._colorize(image)
            self._save(colorized, output_path, format_tag)
            result.success = True
        except FileProcessingError as exc:
            result.mark_failed(exc.category, str(exc))
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("处理 %s 时出现未预期的异常", input_path, exc_info=True)
            result.mark_failed(ErrorCategory.UNEXPECTED, str(exc) or type(exc).__name__)
        finally:
            _close_if_needed(image, colorized)
            result.elapsed_seconds = time.perf_counter() - started

        if result.success:
            LOGGER.info("完成 %s -> %s (%.2fs)", input_path, output_path, result.elapsed_seconds)
        else:
            LOGGER.info("失败 %s: [%s] %s", input_path, result.error_category.value, result.error_message)
        return result

    def _load(self, input_path: Path) -> Image.Image:
        self.feedback.info(f"加载输入图像: {input_path}")
        self.status_file.write(STATUS_LOADING)
        try:
            image = self.codec.decode(input_path)
        except MemoryError as exc:
            raise ResourceExhaustedError(f"图像过大或已损坏: {input_path}") from exc
        self.feedback.info(f"图像尺寸: {image.width}x{image.height}")
        return image

    def _check_dimensions(self, image: Image.Image) -> None:
        """尺寸过小或过大时给出提示，不影响处理结果。"""

        width, height = image.size
        if width < MIN_RECOMMENDED_SIZE or height < MIN_RECOMMENDED_SIZE:
            self.feedback.warning(f"图像非常小 ({width}x{height})，上色效果可能不理想。")
            LOGGER.info("图像尺寸过小: %dx%d", width, height)
        elif width > MAX_RECOMMENDED_SIZE or height > MAX_RECOMMENDED_SIZE:
            self.feedback.warning(f"图像非常大 ({width}x{height})，处理可能耗时较长并占用大量内存。")
            LOGGER.info("图像尺寸过大: %dx%d", width, height)

    def _colorize(self, image: Image.Image) -> Image.Image:
        self.feedback.info("开始上色...")
        self.status_file.write(STATUS_PROCESSING)
        bridge = ProgressBridge(self.status_file, on_update=self.feedback.progress)
        try:
            colorized = self.colorizer.colorize(image, progress=bridge)
        except MemoryError as exc:
            raise ResourceExhaustedError("上色过程中内存不足，请尝试更小的图像或释放内存。") from exc
        finally:
            self.feedback.end_progress()
        self.feedback.info("上色完成！")
        return colorized

    def _save(self, image: Image.Image, output_path: Path, format_tag: str) -> None:
        self.feedback.info(f"保存输出图像: {output_path}")
        self.status_file.write(STATUS_SAVING)
        try:
            self.codec.encode(image, output_path, format_tag)
        except OSError as exc:
            raise OutputWriteError(f"写入文件失败: {output_path} ({exc})") from exc
        self.status_file.write(STATUS_COMPLETE)


def _validate_paths(input_path: Path, output_path: Path) -> str:
    """按顺序校验输入与输出路径，返回输出格式标签。"""

    if not input_path.is_file() or not os.access(input_path, os.R_OK):
        raise InputNotFoundError(f"找不到输入文件或无法读取: {input_path}")

    if not input_path.suffix:
        raise UnsupportedFormatError(f"输入文件没有扩展名: {input_path}（支持的格式: {SUPPORTED_FORMAT_NAMES}）")

    format_tag = format_for_path(output_path)
    if format_tag is None:
        raise UnsupportedFormatError(
            f"不支持的输出格式: {output_path.suffix or '(无扩展名)'}（支持的格式: {SUPPORTED_FORMAT_NAMES}）"
        )
    return format_tag


def _ensure_output_dir(output_path: Path) -> None:
    directory = output_path.parent
    if directory.is_dir():
        return
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(f"无法创建输出目录: {directory} ({exc})") from exc


def _close_if_needed(*images: Optional[Image.Image]) -> None:
    for img in images:
        if img is not None:
            img.close()
