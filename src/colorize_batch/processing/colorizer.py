"""上色引擎接口与内置的色调映射实现。"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Tuple

import cv2
import numpy as np
from PIL import Image

from colorize_batch.core.progress import ProgressCallback

LOGGER = logging.getLogger(__name__)


class Colorizer(Protocol):
    """单张图片上色接口。

    ``progress`` 在 ``colorize`` 调用内部被同步调用，参数为 0~100 的百分比。
    内存不足时抛出 ``MemoryError``。
    """

    def colorize(self, image: Image.Image, progress: Optional[ProgressCallback] = None) -> Image.Image: ...


class ToneColorizer:
    """基于亮度的色调映射上色器。

    在 OpenCV 的 8 位 LAB 空间中，以灰度作为 L 通道，按亮度为阴影叠加冷色、
    为高光叠加暖色，中间调色度最强。图像按行分块处理，每完成一块上报一次进度。
    """

    def __init__(
        self,
        band_height: int = 64,
        shadow_tint: Tuple[float, float] = (-4.0, -18.0),
        highlight_tint: Tuple[float, float] = (10.0, 26.0),
        strength: float = 1.0,
    ) -> None:
        if band_height <= 0:
            raise ValueError("band_height 必须大于 0")
        self.band_height = band_height
        self.shadow_tint = shadow_tint
        self.highlight_tint = highlight_tint
        self.strength = strength

    def colorize(self, image: Image.Image, progress: Optional[ProgressCallback] = None) -> Image.Image:
        gray = np.asarray(image.convert("L"), dtype=np.uint8)
        height = gray.shape[0]
        rgb = np.empty((*gray.shape, 3), dtype=np.uint8)

        _emit(progress, 0.0)
        for top in range(0, height, self.band_height):
            bottom = min(top + self.band_height, height)
            rgb[top:bottom] = self._colorize_band(gray[top:bottom])
            _emit(progress, 100.0 * bottom / height)

        LOGGER.debug("上色完成: %dx%d", image.width, image.height)
        return Image.fromarray(rgb)

    def _colorize_band(self, band: np.ndarray) -> np.ndarray:
        lum = band.astype(np.float32) / 255.0
        weight = 4.0 * lum * (1.0 - lum) * self.strength

        shadow_a, shadow_b = self.shadow_tint
        high_a, high_b = self.highlight_tint
        a = 128.0 + weight * ((1.0 - lum) * shadow_a + lum * high_a)
        b = 128.0 + weight * ((1.0 - lum) * shadow_b + lum * high_b)

        lab = np.dstack(
            [
                band,
                np.clip(a, 0, 255).astype(np.uint8),
                np.clip(b, 0, 255).astype(np.uint8),
            ]
        )
        return cv2.cvtColor(lab, cv2.COLOR_LAB2RGB)


def _emit(progress: Optional[ProgressCallback], percent: float) -> None:
    if progress is not None:
        progress(percent)
