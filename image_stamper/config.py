# -*- coding: utf-8 -*-
"""盖章默认参数。

调用方可以在构造 ImageStamper 时覆盖 policy / text_spec / font_path，
其余常量是固定策略。
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .core.compositor import FitPolicy


@dataclass(frozen=True)
class TextSpec:
    text_color: Tuple[int, int, int, int] = (128, 128, 128, 180)  # 半透明灰
    font_size: float = 24.0
    bottom_padding: int = 20
    fallback_char_width: int = 12  # 方块渲染时每个字符占用的宽度


# apply 的默认值
DEFAULT_QUALITY = 75.0
DEFAULT_FORMAT = "jpg"
DEFAULT_OPACITY_PERCENT = 50.0
DEFAULT_FIT_POLICY = FitPolicy.cover()
DEFAULT_TEXT_SPEC = TextSpec()

# 输出文件名后缀：photo.png -> photo_stamped.webp
STAMPED_SUFFIX = "_stamped"
