# -*- coding: utf-8 -*-
"""Image data models: user selections, bundled assets and encoded uploads."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fontidentifier.utils.image_utils import decode_data_uri, split_data_uri


@dataclass(frozen=True)
class FileSelection:
    """A file picked by the user, before any byte has been read."""

    path: Path
    mime_type: str
    size_bytes: int

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class DefaultAsset:
    """The bundled default image. ``path=None`` means the built-in rendered sample."""

    path: Path | None = None


@dataclass(frozen=True)
class UploadedImage:
    """An image encoded as a data URI, ready for preview and for the analysis request."""

    data_uri: str
    mime_type: str
    size_bytes: int
    name: str = ""

    @property
    def base64_data(self) -> str:
        return split_data_uri(self.data_uri)[1]

    def to_bytes(self) -> bytes:
        return decode_data_uri(self.data_uri)
