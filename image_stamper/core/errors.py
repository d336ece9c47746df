# -*- coding: utf-8 -*-
"""盖章流程的异常层级。

所有异常都继承自 StamperError，调用方只需捕获这一个基类即可。
"""
from __future__ import annotations


class StamperError(Exception):
    """Base class for all image stamping failures."""


class DecodeError(StamperError):
    """输入或印章字节无法被解码为图像。"""


class StampNotSetError(StamperError):
    """尚未设置印章就调用了 apply。"""

    def __init__(self, message: str = "Stamp not set"):
        super().__init__(message)


class BufferReconstructionError(StamperError):
    """像素数据长度与记录的宽高不一致。"""


class UnsupportedFormatError(StamperError, ValueError):
    """Requested output format is not jpg/jpeg/webp."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"Unsupported format: {fmt}. Use 'jpg' or 'webp'")


class EncodeError(StamperError):
    """输出编码失败。"""


class FontLoadError(StamperError):
    """字体无法加载，文本水印将退回方块渲染。"""
