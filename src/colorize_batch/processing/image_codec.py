"""图片解码与编码实现。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from PIL import Image, ImageOps, UnidentifiedImageError

from colorize_batch.core.exceptions import (
    InvalidImageError,
    OutputWriteError,
    ResourceExhaustedError,
)

LOGGER = logging.getLogger(__name__)

# 扩展名（小写） -> 容器格式标签
SUPPORTED_FORMATS = {
    ".bmp": "BMP",
    ".emf": "EMF",
    ".exif": "EXIF",
    ".gif": "GIF",
    ".ico": "ICO",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".wmf": "WMF",
}

SUPPORTED_FORMAT_NAMES = "BMP, EMF, EXIF, GIF, ICO, JPG, PNG, TIFF, WMF"

# Pillow 中没有独立写入器的格式标签。
_PILLOW_FORMATS = {
    "EMF": "WMF",
    "EXIF": "JPEG",
}


def format_for_path(path: Path) -> Optional[str]:
    """根据扩展名返回容器格式标签，不支持时返回 None。"""

    return SUPPORTED_FORMATS.get(path.suffix.lower())


class ImageCodec(Protocol):
    """图片容器格式的编解码接口。"""

    def decode(self, path: Path) -> Image.Image: ...

    def encode(self, image: Image.Image, path: Path, format_tag: str) -> None: ...


class PillowImageCodec:
    """基于 Pillow 的默认编解码实现。"""

    def __init__(self, jpeg_quality: int = 95) -> None:
        self.jpeg_quality = jpeg_quality

    def decode(self, path: Path) -> Image.Image:
        """加载单张图片并执行 EXIF 旋转与模式归一化。

        返回值为新的 Image 对象，调用者负责关闭。
        """

        try:
            with Image.open(path) as img:
                img.load()

                # EXIF Orientation 校正
                img = ImageOps.exif_transpose(img)

                if img.mode != "RGB":
                    img = _convert_to_rgb(img)

                return img.copy()
        except Image.DecompressionBombError as exc:
            raise ResourceExhaustedError(f"图像过大: {path}") from exc
        except MemoryError as exc:
            raise ResourceExhaustedError(f"图像过大或已损坏: {path}") from exc
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            LOGGER.debug("无法识别图像文件 %s: %s", path, exc)
            raise InvalidImageError(f"不是有效的图像文件: {path}") from exc

    def encode(self, image: Image.Image, path: Path, format_tag: str) -> None:
        """按格式标签将图片写入磁盘，失败时抛出 OutputWriteError。"""

        pillow_format = _PILLOW_FORMATS.get(format_tag, format_tag)

        save_params = {}
        image_to_save = image
        if pillow_format == "JPEG":
            save_params.update(quality=self.jpeg_quality, subsampling=1)
            if image.mode != "RGB":
                image_to_save = image.convert("RGB")
        elif image.mode not in {"RGB", "RGBA"}:
            image_to_save = image.convert("RGB")

        try:
            image_to_save.save(path, format=pillow_format, **save_params)
        except (OSError, ValueError, KeyError) as exc:
            raise OutputWriteError(f"写入文件失败: {path} ({exc})") from exc
        finally:
            if image_to_save is not image:
                image_to_save.close()


def _convert_to_rgb(img: Image.Image) -> Image.Image:
    """将任意模式图像转换为 RGB。"""

    if img.mode in {"RGBA", "LA"}:
        # 保留 Alpha 信息，通过白色背景混合生成 RGB。
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img.convert("RGBA"), mask=img.split()[-1])
        return background

    return img.convert("RGB")
