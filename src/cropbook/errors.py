"""Error kinds raised by the export pipeline."""


class CropbookError(Exception):
    """Base class for all cropbook errors."""


class UnsupportedImageFormatError(CropbookError):
    """Raised when a crop is encoded as, or arrives in, a format other than JPEG or PNG."""


class MissingPageError(CropbookError):
    """Raised when a registered page does not exist in the target document."""

    def __init__(self, page_number: int, page_count: int) -> None:
        super().__init__(
            f"Page {page_number} does not exist (document has {page_count} pages)"
        )
        self.page_number = page_number
        self.page_count = page_count


class DocumentNotLoadedError(CropbookError):
    """Raised when a render is requested before a document is loaded."""


class RegionFileError(CropbookError):
    """Raised when a region file cannot be parsed."""
