"""Cropping marked regions out of rendered pages."""

from .extractor import (
    CropArtifact,
    EncodedImage,
    build_artifacts,
    encode_region,
    extract_crop,
    make_label,
    sniff_format,
)

__all__ = [
    "CropArtifact",
    "EncodedImage",
    "build_artifacts",
    "encode_region",
    "extract_crop",
    "make_label",
    "sniff_format",
]
