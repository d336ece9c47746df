"""Shared fixtures: small images generated in memory with Pillow."""

import io

import pytest
from PIL import Image


def make_image_bytes(size, color, mode="RGBA", fmt="PNG"):
    img = Image.new(mode, size, color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def open_bytes(data):
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def red_stamp_bytes():
    return make_image_bytes((100, 50), (255, 0, 0, 255))


@pytest.fixture
def white_jpeg_bytes():
    return make_image_bytes((200, 200), (255, 255, 255), mode="RGB", fmt="JPEG")
