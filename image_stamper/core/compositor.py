# -*- coding: utf-8 -*-
"""印章合成：缩放策略、定位与 alpha 混合。

- cover：按 max(sx, sy) 缩放铺满画布，超出部分在混合时裁掉
- contain：扣除两侧留白后按 min(sx, sy) 缩放，印章完整落在画布内
- 尺寸与偏移全部用 float32 计算并向零截断
"""
from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import NamedTuple

import numpy as np
from PIL import Image

from .errors import BufferReconstructionError
from .raster import PixelBuffer

logger = logging.getLogger(__name__)

FIT_MODES = ("cover", "contain")


@dataclass(frozen=True)
class FitPolicy:
    mode: str = "cover"
    padding: int = 0

    def __post_init__(self):
        if self.mode not in FIT_MODES:
            raise ValueError(f"Unknown fit mode: {self.mode}")
        if self.padding < 0:
            raise ValueError("padding must be >= 0")

    @classmethod
    def cover(cls) -> "FitPolicy":
        return cls("cover", 0)

    @classmethod
    def contain(cls, padding: int = 0) -> "FitPolicy":
        return cls("contain", int(padding))


class Placement(NamedTuple):
    scaled_w: int
    scaled_h: int
    offset_x: int
    offset_y: int


def compute_scale(canvas_w: int, canvas_h: int, stamp_w: int, stamp_h: int, policy: FitPolicy) -> np.float32:
    if stamp_w <= 0 or stamp_h <= 0:
        raise ValueError(f"Stamp has no area: {stamp_w}x{stamp_h}")
    if policy.mode == "cover":
        avail_w, avail_h = canvas_w, canvas_h
    else:
        avail_w = max(0, canvas_w - 2 * policy.padding)
        avail_h = max(0, canvas_h - 2 * policy.padding)
    sx = np.float32(avail_w) / np.float32(stamp_w)
    sy = np.float32(avail_h) / np.float32(stamp_h)
    return max(sx, sy) if policy.mode == "cover" else min(sx, sy)


def _center(canvas: int, scaled: int) -> int:
    if scaled > canvas:
        # 印章比画布大：负偏移，居中溢出
        return -((scaled - canvas) // 2)
    return (canvas - scaled) // 2


def compute_placement(canvas_w: int, canvas_h: int, stamp_w: int, stamp_h: int, policy: FitPolicy) -> Placement:
    scale = compute_scale(canvas_w, canvas_h, stamp_w, stamp_h, policy)
    scaled_w = int(np.float32(stamp_w) * scale)
    scaled_h = int(np.float32(stamp_h) * scale)
    placement = Placement(
        scaled_w,
        scaled_h,
        _center(canvas_w, scaled_w),
        _center(canvas_h, scaled_h),
    )
    logger.debug(
        "Scaling stamp to: %dx%d (scale: %.2f), position (%d, %d)",
        scaled_w, scaled_h, scale, placement.offset_x, placement.offset_y,
    )
    return placement


def resize_stamp(stamp: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """LANCZOS 重采样；任一目标边为 0 时返回空缓冲区。"""
    if width <= 0 or height <= 0:
        return PixelBuffer.empty()
    try:
        img = stamp.to_image()
    except ValueError as e:
        raise BufferReconstructionError(f"Failed to create stamp image buffer: {e}") from e
    if img.size == (width, height):
        return stamp
    return PixelBuffer.from_image(img.resize((width, height), Image.LANCZOS))


def clamp_unit(value: float) -> float:
    # NaN 视为下界
    if value != value:
        return 0.0
    return max(0.0, min(1.0, float(value)))


def blend(base: PixelBuffer, overlay: PixelBuffer, offset_x: int, offset_y: int, opacity: float) -> PixelBuffer:
    """把 overlay 以 (offset_x, offset_y) 叠加到 base 上，返回新缓冲区。

    每像素 a = overlay.a / 255 * opacity，
    rgb = base * (1 - a) + overlay * a，结果截断为整数；
    base 的 alpha 通道保持不变，落在画布外的像素直接跳过。
    """
    opacity = clamp_unit(opacity)
    if overlay.is_empty() or base.is_empty():
        return base

    # 求 overlay 与 base 的相交区域
    x0 = max(0, offset_x)
    y0 = max(0, offset_y)
    x1 = min(base.width, offset_x + overlay.width)
    y1 = min(base.height, offset_y + overlay.height)
    if x0 >= x1 or y0 >= y1:
        return base

    dst = base.as_array()
    src = np.frombuffer(overlay.pixels, dtype=np.uint8).reshape(
        (overlay.height, overlay.width, 4)
    )
    src = src[y0 - offset_y:y1 - offset_y, x0 - offset_x:x1 - offset_x]
    region = dst[y0:y1, x0:x1]

    alpha = (src[:, :, 3].astype(np.float32) / np.float32(255.0)) * np.float32(opacity)
    alpha = alpha[:, :, np.newaxis]
    inv_alpha = np.float32(1.0) - alpha
    mixed = region[:, :, :3].astype(np.float32) * inv_alpha + src[:, :, :3].astype(np.float32) * alpha
    region[:, :, :3] = mixed.astype(np.uint8)

    return PixelBuffer.from_array(dst)
