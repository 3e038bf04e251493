# -*- coding: utf-8 -*-
"""Image helpers: data URIs, format sniffing and the rendered sample image."""

from __future__ import annotations

import base64
import io
import logging

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"

# Serif faces tried in order for the rendered sample; Pillow's own font is the last resort.
SAMPLE_FONT_CANDIDATES = (
    "EBGaramond-Regular.ttf",
    "Garamond.ttf",
    "DejaVuSerif.ttf",
    "LiberationSerif-Regular.ttf",
    "Georgia.ttf",
    "times.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf",
)

SAMPLE_LINES = (
    "Tales at Bedtime",
    "",
    "Tom the Scout-Cub had fetched the day before",
    "a basket of apples from the orchard, and now",
    "he sat by the fire to hear the evening story.",
)


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def split_data_uri(data_uri: str) -> tuple[str, str]:
    """Return ``(mime_type, base64_payload)`` of a base64 data URI."""
    if not data_uri.startswith("data:") or "," not in data_uri:
        raise ValueError("Not a data URI")
    header, payload = data_uri[5:].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 data URIs are supported")
    return header[: -len(";base64")], payload


def decode_data_uri(data_uri: str) -> bytes:
    """Decode a base64 data URI back to bytes."""
    return base64.b64decode(split_data_uri(data_uri)[1].encode("ascii"))


def sniff_image_mime(data: bytes) -> str | None:
    """Guess an image MIME type from magic bytes."""
    if data.startswith(PNG_SIGNATURE):
        return "image/png"
    if data.startswith(JPEG_SIGNATURE):
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    return None


def _load_sample_font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    for candidate in SAMPLE_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.debug("No serif TrueType font found, using Pillow's default font")
    return ImageFont.load_default(size=size)


def render_sample_image(lines: tuple[str, ...] = SAMPLE_LINES, width: int = 1000, font_size: int = 34) -> bytes:
    """Render a short book-page text sample as PNG bytes."""
    font = _load_sample_font(font_size)
    title_font = _load_sample_font(int(font_size * 1.5))
    margin = 60
    line_height = int(font_size * 1.45)
    height = margin * 2 + int(line_height * 1.5) + line_height * (len(lines) - 1)

    image = Image.new("RGB", (width, height), (250, 247, 240))
    draw = ImageDraw.Draw(image)
    y = margin
    for index, line in enumerate(lines):
        line_font = title_font if index == 0 else font
        draw.text((margin, y), line, fill=(30, 30, 30), font=line_font)
        y += int(line_height * 1.5) if index == 0 else line_height

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
