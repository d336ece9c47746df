# -*- coding: utf-8 -*-
"""输出编码。

- 格式标签在边界处解析一次：jpg/jpeg -> Jpeg(quality)，webp -> WebP()
- JPEG：直接丢弃 alpha 通道（不与背景色合成），按质量编码
- WebP：保留 alpha，使用编码器默认参数
"""
from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
import logging
from typing import Union

from .errors import EncodeError, UnsupportedFormatError
from .raster import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Jpeg:
    quality: int = 75

    def __post_init__(self):
        if not 0 <= self.quality <= 100:
            raise ValueError(f"JPEG quality out of range: {self.quality}")


@dataclass(frozen=True)
class WebP:
    pass


OutputFormat = Union[Jpeg, WebP]


def clamp_quality(quality: float) -> int:
    # 与 float -> u8 的饱和转换一致：先夹到 [0, 100]，再向零截断，NaN 记为 0
    if quality != quality:
        return 0
    return int(max(0.0, min(100.0, float(quality))))


def parse_format(tag: str, quality: float = 75.0) -> OutputFormat:
    key = (tag or "").strip().lower()
    if key in ("jpg", "jpeg"):
        return Jpeg(clamp_quality(quality))
    if key == "webp":
        return WebP()
    raise UnsupportedFormatError(tag)


def extension(fmt: OutputFormat) -> str:
    return "jpg" if isinstance(fmt, Jpeg) else "webp"


def mime_type(fmt: OutputFormat) -> str:
    return "image/jpeg" if isinstance(fmt, Jpeg) else "image/webp"


def encode(buf: PixelBuffer, fmt: OutputFormat) -> bytes:
    if not isinstance(fmt, (Jpeg, WebP)):
        raise UnsupportedFormatError(repr(fmt))
    img = buf.to_image()
    out = BytesIO()
    try:
        if isinstance(fmt, Jpeg):
            img.convert("RGB").save(out, format="JPEG", quality=fmt.quality, optimize=True)
        else:
            img.save(out, format="WEBP")
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode {extension(fmt).upper()}: {e}") from e
    data = out.getvalue()
    logger.debug("Encoded %dx%d as %s, %d bytes", buf.width, buf.height, mime_type(fmt), len(data))
    return data
