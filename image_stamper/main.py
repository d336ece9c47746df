# -*- coding: utf-8 -*-
"""命令行入口：给单张图片盖章。

示例：
    image-stamper logo.png photo.jpg --format webp --filename-text
"""
from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Optional

import piexif

from .config import DEFAULT_FORMAT, DEFAULT_OPACITY_PERCENT, DEFAULT_QUALITY
from .core.compositor import FitPolicy
from .core.errors import DecodeError, StamperError, UnsupportedFormatError
from .stamper import ImageStamper, stamped_filename

logger = logging.getLogger(__name__)


def get_exif_date(image_path: str) -> Optional[str]:
    """读取 EXIF 拍摄日期，返回 YYYY-MM-DD；没有则返回 None。"""
    try:
        exif_dict = piexif.load(image_path)
        date_time = exif_dict["Exif"][piexif.ExifIFD.DateTimeOriginal].decode("utf-8")
        return date_time.split(" ")[0].replace(":", "-")
    except (KeyError, ValueError, piexif.InvalidImageDataError):
        return None


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="image-stamper", description="Composite a stamp image onto a photo.")
    parser.add_argument("stamp", help="Path to the stamp (logo) image.")
    parser.add_argument("input", help="Path to the image to stamp.")
    parser.add_argument("-o", "--output", help="Output path (default: <input>_stamped.<ext> next to the input).")
    parser.add_argument("--format", default=DEFAULT_FORMAT, help="Output format: jpg, jpeg or webp.")
    parser.add_argument("--quality", type=float, default=DEFAULT_QUALITY, help="JPEG quality 0-100.")
    parser.add_argument("--opacity", type=float, default=DEFAULT_OPACITY_PERCENT, help="Stamp opacity in percent.")
    parser.add_argument("--fit", default="cover", choices=["cover", "contain"], help="Stamp fit policy.")
    parser.add_argument("--padding", type=int, default=0, help="Padding in pixels for --fit contain.")
    text = parser.add_mutually_exclusive_group()
    text.add_argument("--text", default="", help="Text watermark drawn at the bottom.")
    text.add_argument("--filename-text", action="store_true", help="Use the input file name as text watermark.")
    text.add_argument("--exif-date", action="store_true", help="Use the EXIF shooting date as text watermark.")
    parser.add_argument("--font", help="TrueType font for the text watermark (default: bundled font).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _watermark_text(args: argparse.Namespace) -> str:
    if args.filename_text:
        return os.path.basename(args.input)
    if args.exif_date:
        date_str = get_exif_date(args.input)
        if not date_str:
            logger.info("Could not find date information for %s", os.path.basename(args.input))
        return date_str or ""
    return args.text


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    policy = FitPolicy.contain(args.padding) if args.fit == "contain" else FitPolicy.cover()
    stamper = ImageStamper(policy=policy, font_path=args.font)
    try:
        stamper.set_stamp(_read(args.stamp))
        output = args.output or os.path.join(
            os.path.dirname(args.input), stamped_filename(args.input, args.format)
        )
        data = stamper.apply(
            _read(args.input),
            quality=args.quality,
            format=args.format,
            filename=_watermark_text(args),
            opacity_percent=args.opacity,
        )
        with open(output, "wb") as f:
            f.write(data)
    except FileNotFoundError as e:
        print(f"Error: The file '{e.filename}' was not found.", file=sys.stderr)
        return 2
    except (DecodeError, UnsupportedFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except StamperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Stamped image saved to: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
