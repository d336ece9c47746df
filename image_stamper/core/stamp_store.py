# -*- coding: utf-8 -*-
"""印章存储。

职责：
- 解码并持有印章的 RGBA 像素及宽高
- 仅通过 set_stamp 整体替换；解码失败时保持原状态
- 读写加锁，apply 期间拿到的是不可变快照
"""
from __future__ import annotations
import logging
import threading

from .errors import StampNotSetError
from .raster import PixelBuffer, decode_rgba

logger = logging.getLogger(__name__)


class StampStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._stamp = PixelBuffer.empty()

    @property
    def width(self) -> int:
        return self._stamp.width

    @property
    def height(self) -> int:
        return self._stamp.height

    @property
    def size(self) -> tuple[int, int]:
        """宽高成对读取，避免与 set_stamp 交错。"""
        with self._lock:
            stamp = self._stamp
        return stamp.width, stamp.height

    def set_stamp(self, data: bytes) -> None:
        logger.info("Setting stamp image, size: %d bytes", len(data))
        # 先在锁外解码，成功后再原子替换
        stamp = decode_rgba(data, what="stamp image")
        with self._lock:
            self._stamp = stamp
        logger.info("Stamp set successfully: %dx%d", stamp.width, stamp.height)

    def is_set(self) -> bool:
        with self._lock:
            return not self._stamp.is_empty()

    def snapshot(self) -> PixelBuffer:
        with self._lock:
            stamp = self._stamp
        if stamp.is_empty():
            raise StampNotSetError()
        return stamp

    def clear(self) -> None:
        with self._lock:
            self._stamp = PixelBuffer.empty()
