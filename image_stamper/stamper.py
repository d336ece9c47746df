# -*- coding: utf-8 -*-
"""ImageStamper：对外的字节进 / 字节出接口。

流程：set_stamp 一次，之后每次 apply：
解码输入 -> 计算缩放与位置 -> 混合印章 -> 可选文本水印 -> 编码输出。
"""
from __future__ import annotations
import logging
import os
from typing import Optional

from .config import (
    DEFAULT_FIT_POLICY,
    DEFAULT_FORMAT,
    DEFAULT_OPACITY_PERCENT,
    DEFAULT_QUALITY,
    DEFAULT_TEXT_SPEC,
    STAMPED_SUFFIX,
    TextSpec,
)
from .core.compositor import FitPolicy, blend, clamp_unit, compute_placement, resize_stamp
from .core.encoder import encode, extension, parse_format
from .core.raster import decode_rgba
from .core.stamp_store import StampStore
from .core.text_overlay import TextWatermarkRenderer

logger = logging.getLogger(__name__)


def stamped_filename(original_name: str, fmt: str = DEFAULT_FORMAT) -> str:
    """photo.png -> photo_stamped.jpg（扩展名取决于输出格式）"""
    stem, _ = os.path.splitext(os.path.basename(original_name))
    return f"{stem}{STAMPED_SUFFIX}.{extension(parse_format(fmt))}"


class ImageStamper:
    def __init__(
        self,
        *,
        policy: FitPolicy = DEFAULT_FIT_POLICY,
        text_spec: TextSpec = DEFAULT_TEXT_SPEC,
        font_path: Optional[str] = None,
    ):
        self.policy = policy
        self._store = StampStore()
        self._text = TextWatermarkRenderer(text_spec, font_path)

    # ---------- 印章 ----------
    def set_stamp(self, stamp_bytes: bytes) -> None:
        self._store.set_stamp(stamp_bytes)

    def is_set(self) -> bool:
        return self._store.is_set()

    def reset_stamp(self) -> None:
        self._store.clear()

    @property
    def stamp_size(self) -> tuple[int, int]:
        return self._store.size

    # ---------- apply 的各个入口 ----------
    def apply_stamp(self, image_bytes: bytes) -> bytes:
        return self.apply(image_bytes)

    def apply_stamp_with_quality(self, image_bytes: bytes, quality: float) -> bytes:
        return self.apply(image_bytes, quality=quality)

    def apply_stamp_with_options(self, image_bytes: bytes, quality: float = DEFAULT_QUALITY, format: str = DEFAULT_FORMAT) -> bytes:
        return self.apply(image_bytes, quality=quality, format=format)

    def apply_stamp_with_watermark(
        self,
        image_bytes: bytes,
        quality: float = DEFAULT_QUALITY,
        format: str = DEFAULT_FORMAT,
        filename: str = "",
        opacity_percent: float = DEFAULT_OPACITY_PERCENT,
    ) -> bytes:
        return self.apply(image_bytes, quality, format, filename, opacity_percent)

    def apply(
        self,
        image_bytes: bytes,
        quality: float = DEFAULT_QUALITY,
        format: str = DEFAULT_FORMAT,
        filename: str = "",
        opacity_percent: float = DEFAULT_OPACITY_PERCENT,
    ) -> bytes:
        stamp = self._store.snapshot()
        logger.info("Processing image, size: %d bytes", len(image_bytes))

        base = decode_rgba(image_bytes)
        logger.debug("Image dimensions: %dx%d", base.width, base.height)
        fmt = parse_format(format, quality)

        placement = compute_placement(base.width, base.height, stamp.width, stamp.height, self.policy)
        scaled = resize_stamp(stamp, placement.scaled_w, placement.scaled_h)
        opacity = clamp_unit(opacity_percent / 100.0)
        out = blend(base, scaled, placement.offset_x, placement.offset_y, opacity)

        out = self._text.overlay_text(out, filename)

        data = encode(out, fmt)
        logger.info("Generated %s image, size: %d bytes", extension(fmt), len(data))
        return data
