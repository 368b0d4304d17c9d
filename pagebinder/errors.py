# pagebinder/errors.py
# ============================================================
# Error Taxonomy
# ============================================================
# Per-file errors (DecodeError, EncodeError) are caught by the
# assembler and the file is skipped. Everything else is fatal
# and propagates to the CLI, which exits with status 1.
# ============================================================


class PageBinderError(Exception):
    """Base class for all pagebinder errors."""


class DirectoryReadError(PageBinderError):
    """The source directory could not be listed."""


class NormalizationError(PageBinderError):
    """A single image could not be turned into a page."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"{name}: {reason}")


class DecodeError(NormalizationError):
    """The byte stream is not a decodable image in a supported format."""


class EncodeError(NormalizationError):
    """A decoded raster could not be re-encoded as JPEG."""


class DocumentFinalizedError(PageBinderError):
    """A page was added to a document that is already finalized."""


class EmptyDocumentError(PageBinderError):
    """No page could be produced, so there is nothing to write."""


class OutputWriteError(PageBinderError):
    """The finished PDF could not be written."""
