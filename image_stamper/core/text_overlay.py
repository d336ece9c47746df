# -*- coding: utf-8 -*-
"""文本水印渲染器：把单行文本（通常是文件名）绘制在画布底部居中。

两种渲染路径：
- 字形渲染：使用 Pillow 内置字体（或指定的 TrueType 文件）
- 方块渲染：字体无法加载时，每个字符画一个实心方块，保证至少有可见标记

两条路径都先画到与画布同尺寸的 L 遮罩上，再按 compositor.blend 的规则混合，
因此天然裁剪在画布范围内，且不会修改 alpha 通道。
"""
from __future__ import annotations
import logging
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from ..config import TextSpec, DEFAULT_TEXT_SPEC
from .compositor import blend
from .errors import FontLoadError
from .raster import PixelBuffer

logger = logging.getLogger(__name__)

MIN_LEFT_MARGIN = 10


def load_font(size: float, font_path: Optional[str] = None) -> ImageFont.FreeTypeFont:
    """加载字体；没有给出路径时使用 Pillow 自带的字体。"""
    try:
        if font_path:
            font = ImageFont.truetype(font_path, size)
        else:
            font = ImageFont.load_default(size=size)
    except (OSError, ImportError, ValueError) as e:
        raise FontLoadError(f"Failed to load font {font_path or '<bundled>'}: {e}") from e
    if not isinstance(font, ImageFont.FreeTypeFont):
        raise FontLoadError("FreeType support is unavailable; only the bitmap font is present")
    return font


def _left_offset(canvas_w: int, text_width: float) -> int:
    return max(MIN_LEFT_MARGIN, int((canvas_w - text_width) / 2))


class TextWatermarkRenderer:
    def __init__(self, spec: TextSpec = DEFAULT_TEXT_SPEC, font_path: Optional[str] = None):
        self.spec = spec
        try:
            self._font: Optional[ImageFont.FreeTypeFont] = load_font(spec.font_size, font_path)
        except FontLoadError as e:
            logger.warning("%s; falling back to block glyphs", e)
            self._font = None

    @property
    def uses_fallback(self) -> bool:
        return self._font is None

    def text_top(self, canvas_h: int) -> int:
        return int(canvas_h - self.spec.bottom_padding - self.spec.font_size)

    def overlay_text(self, base: PixelBuffer, text: str) -> PixelBuffer:
        if not text or base.is_empty():
            return base
        if self._font is not None:
            mask = self._glyph_mask(base.width, base.height, text)
        else:
            mask = self._block_mask(base.width, base.height, text)
        mask = self._clip_to_band(mask)
        if mask.getbbox() is None:
            return base
        r, g, b, _ = self.spec.text_color
        layer = Image.new("RGBA", base.size, (r, g, b, 0))
        layer.putalpha(mask)
        return blend(base, PixelBuffer.from_image(layer), 0, 0, 1.0)

    def _clip_to_band(self, mask: Image.Image) -> Image.Image:
        # 只保留 [text_top, h - bottom_padding) 行，降部不得进入底部留白
        width, height = mask.size
        top = self.text_top(height)
        bottom = height - self.spec.bottom_padding
        draw = ImageDraw.Draw(mask)
        if top > 0:
            draw.rectangle([0, 0, width - 1, top - 1], fill=0)
        if bottom < height:
            draw.rectangle([0, max(0, bottom), width - 1, height - 1], fill=0)
        return mask

    def _glyph_mask(self, width: int, height: int, text: str) -> Image.Image:
        font = self._font
        text_width = font.getlength(text)
        x = _left_offset(width, text_width)
        y = self.text_top(height)
        logger.debug("Text '%s' width %.1f at (%d, %d)", text, text_width, x, y)
        mask = Image.new("L", (width, height), 0)
        ImageDraw.Draw(mask).text((x, y), text, font=font, fill=self.spec.text_color[3], anchor="la")
        return mask

    def _block_mask(self, width: int, height: int, text: str) -> Image.Image:
        cell = self.spec.fallback_char_width
        x = _left_offset(width, len(text) * cell)
        bottom = height - self.spec.bottom_padding
        top = self.text_top(height)
        # 方块宽度留 2px 间隔，便于区分字符
        block_w = max(1, cell - 2)
        mask = Image.new("L", (width, height), 0)
        draw = ImageDraw.Draw(mask)
        for i, _ in enumerate(text):
            left = x + i * cell
            if left >= width:
                break
            draw.rectangle([left, top, left + block_w - 1, bottom - 1], fill=self.spec.text_color[3])
        return mask
