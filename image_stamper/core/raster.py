# -*- coding: utf-8 -*-
"""RGBA 像素缓冲区与解码。

职责：
- PixelBuffer：宽、高 + 行优先 RGBA 字节（每像素 4 字节）
- 从任意压缩字节解码为 RGBA（不论源图是否带透明通道）
- 与 Pillow Image / numpy 数组互相转换
"""
from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
import logging

import numpy as np
from PIL import Image

from .errors import BufferReconstructionError, DecodeError

logger = logging.getLogger(__name__)

CHANNELS = 4
# 16 位（及 32 位整型）灰度模式
WIDE_GRAY_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I")


@dataclass(frozen=True)
class PixelBuffer:
    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise BufferReconstructionError(
                f"Invalid raster dimensions {self.width}x{self.height}"
            )
        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise BufferReconstructionError(
                f"Failed to create image buffer: {len(self.pixels)} bytes "
                f"for {self.width}x{self.height} (expected {expected})"
            )

    @classmethod
    def empty(cls) -> "PixelBuffer":
        return cls(0, 0, b"")

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        if img.mode in WIDE_GRAY_MODES:
            # convert() 会把 16 位灰度截断到 255，这里先等比缩放到 8 位
            wide = np.clip(np.asarray(img).astype(np.int64), 0, 65535)
            img = Image.fromarray((wide // 257).astype(np.uint8))
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        return cls(img.width, img.height, img.tobytes())

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """由 (h, w, 4) 的 uint8 数组构造。"""
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise BufferReconstructionError(f"Expected an (h, w, 4) array, got {arr.shape}")
        h, w = arr.shape[:2]
        return cls(w, h, np.ascontiguousarray(arr, dtype=np.uint8).tobytes())

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def is_empty(self) -> bool:
        return not self.pixels

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), self.pixels)

    def as_array(self) -> np.ndarray:
        """返回可写的 (h, w, 4) 副本。"""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            (self.height, self.width, CHANNELS)
        ).copy()


def decode_rgba(data: bytes, what: str = "image") -> PixelBuffer:
    """把压缩图像字节解码为 RGBA 缓冲区。多帧格式只取第一帧。"""
    try:
        img = Image.open(BytesIO(data))
        img.load()
        buf = PixelBuffer.from_image(img)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to load {what}: {e}") from e
    logger.debug("Decoded %s: %dx%d from %d bytes", what, buf.width, buf.height, len(data))
    return buf
