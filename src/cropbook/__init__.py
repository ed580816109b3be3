"""cropbook: stamp marked PDF regions and collect their crops into a gallery appendix."""

from .config import Settings
from .errors import (
    CropbookError,
    DocumentNotLoadedError,
    MissingPageError,
    RegionFileError,
    UnsupportedImageFormatError,
)
from .session import ExportSession

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "CropbookError",
    "DocumentNotLoadedError",
    "MissingPageError",
    "RegionFileError",
    "UnsupportedImageFormatError",
    "ExportSession",
]
