# -*- coding: utf-8 -*-
"""Validate user-selected images and turn them into data URIs."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from fontidentifier.constants import MAX_IMAGE_BYTES
from fontidentifier.models.uploaded_image import DefaultAsset, FileSelection, UploadedImage
from fontidentifier.utils.image_utils import encode_data_uri, render_sample_image, sniff_image_mime

logger = logging.getLogger(__name__)


class ImageLoadError(ValueError):
    """Base class for user-correctable image loading failures."""


class InvalidTypeError(ImageLoadError):
    """The selected file is not an image."""


class TooLargeError(ImageLoadError):
    """The selected file exceeds the upload size limit."""


class ReadError(ImageLoadError):
    """The file could not be read from disk."""


def _format_limit(max_size_bytes: int) -> str:
    megabytes = max_size_bytes / (1024 * 1024)
    return f"{megabytes:g}MB"


def describe_file(path: str | Path) -> FileSelection:
    """Build a FileSelection from a path using the file name's MIME type and on-disk size."""
    file_path = Path(path)
    mime_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    try:
        size_bytes = file_path.stat().st_size
    except OSError as exc:
        raise ReadError("Failed to read the image file. Please try again.") from exc
    return FileSelection(path=file_path, mime_type=mime_type, size_bytes=size_bytes)


def validate_selection(selection: FileSelection, max_size_bytes: int = MAX_IMAGE_BYTES) -> None:
    """Check type, then size. Nothing is read from disk."""
    if not selection.mime_type.startswith("image/"):
        raise InvalidTypeError("Please upload a valid image file")
    if selection.size_bytes > max_size_bytes:
        raise TooLargeError(f"Image size should be less than {_format_limit(max_size_bytes)}")


def load_image(
    source: FileSelection | DefaultAsset | str | Path,
    max_size_bytes: int = MAX_IMAGE_BYTES,
) -> UploadedImage:
    """Load a user selection or the default asset as an UploadedImage."""
    if isinstance(source, DefaultAsset):
        return load_default_image(source, max_size_bytes)
    if not isinstance(source, FileSelection):
        source = describe_file(source)

    validate_selection(source, max_size_bytes)
    try:
        data = source.path.read_bytes()
    except OSError as exc:
        logger.warning("Reading %s failed: %s", source.path, exc)
        raise ReadError("Failed to read the image file. Please try again.") from exc

    logger.info("Loaded image %s (%s, %d bytes)", source.name, source.mime_type, len(data))
    return UploadedImage(
        data_uri=encode_data_uri(data, source.mime_type),
        mime_type=source.mime_type,
        size_bytes=len(data),
        name=source.name,
    )


def load_default_image(
    asset: DefaultAsset | None = None,
    max_size_bytes: int = MAX_IMAGE_BYTES,
) -> UploadedImage:
    """Load the configured default image, or render the built-in text sample.

    A configured file goes through the same type and size checks as an upload.
    """
    asset = asset or DefaultAsset()
    if asset.path is None:
        data = render_sample_image()
        return UploadedImage(
            data_uri=encode_data_uri(data, "image/png"),
            mime_type="image/png",
            size_bytes=len(data),
            name="default-font.png",
        )

    try:
        data = asset.path.read_bytes()
    except OSError as exc:
        logger.error("Default image %s could not be read: %s", asset.path, exc)
        raise ReadError("Failed to load default image") from exc
    mime_type = (
        sniff_image_mime(data)
        or mimetypes.guess_type(asset.path.name)[0]
        or "application/octet-stream"
    )
    validate_selection(FileSelection(path=asset.path, mime_type=mime_type, size_bytes=len(data)), max_size_bytes)
    return UploadedImage(
        data_uri=encode_data_uri(data, mime_type),
        mime_type=mime_type,
        size_bytes=len(data),
        name=asset.path.name,
    )
