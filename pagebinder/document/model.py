# pagebinder/document/model.py
# ============================================================
# Document — Append-Only Page Sequence
# ============================================================
# Holds the normalized pages of one run in page order and
# renders them into a PDF once the run is finished.
#
# Invariants:
#   - pages are only ever appended, never inserted or removed
#   - no page can be added after finalize()
#   - every page is sized from its own image (no global size)
#
# Usage:
#   doc = Document(title="scans")
#   doc.add_page(normalized_page)
#   doc.finalize()
#   pdf_bytes = doc.to_pdf_bytes()
# ============================================================

from typing import Optional

import img2pdf

from pagebinder.errors import DocumentFinalizedError, EmptyDocumentError
from pagebinder.imaging.normalizer import NormalizedPage


class Document:
    """
    An ordered, append-only collection of full-bleed image pages.

    Each page is exactly as large as its image: the JPEG payload is drawn
    at the top-left origin and spans the whole page, with no margin.

    Example:
        >>> doc = Document()
        >>> doc.add_page(page)
        1
        >>> doc.finalize()
        >>> data = doc.to_pdf_bytes()
    """

    def __init__(self, title: Optional[str] = None):
        self.title = title
        self._pages: list[NormalizedPage] = []
        self._finalized = False

    def __len__(self) -> int:
        return len(self._pages)

    @property
    def pages(self) -> tuple[NormalizedPage, ...]:
        """Pages in document order (read-only view)."""
        return tuple(self._pages)

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def add_page(self, page: NormalizedPage) -> int:
        """
        Append a page at the end of the document.

        Returns:
            The 1-indexed page number the page was given.

        Raises:
            DocumentFinalizedError: If the document is already finalized.
        """
        if self._finalized:
            raise DocumentFinalizedError(
                f"cannot add {page.name!r}: document is finalized"
            )
        self._pages.append(page)
        return len(self._pages)

    def finalize(self) -> None:
        """Close the document for further pages. Idempotent."""
        self._finalized = True

    def to_pdf_bytes(self) -> bytes:
        """
        Render the finalized document as PDF bytes.

        JPEG payloads are embedded as-is; img2pdf does not re-encode them.
        Tiny and very large images still get a page of their own size.

        Raises:
            DocumentFinalizedError: If called before finalize().
            EmptyDocumentError: If the document has no pages.
        """
        if not self._finalized:
            raise DocumentFinalizedError("document must be finalized before rendering")
        if not self._pages:
            raise EmptyDocumentError("document has no pages")

        return img2pdf.convert(
            [page.jpeg_bytes for page in self._pages],
            layout_fun=self._layout_fun(),
            title=self.title,
            # The internal engine accepts pages below 3pt and above 14400pt
            engine=img2pdf.Engine.internal,
        )

    def _layout_fun(self):
        # img2pdf calls the layout function once per image, in input order
        remaining = iter(self._pages)

        def layout(imgwidthpx, imgheightpx, ndpi):
            page = next(remaining)
            if (imgwidthpx, imgheightpx) != (page.width_px, page.height_px):
                raise ValueError(
                    f"layout mismatch for {page.name!r}: "
                    f"{imgwidthpx}x{imgheightpx} != {page.width_px}x{page.height_px}"
                )
            width_pt = img2pdf.mm_to_pt(page.width_mm)
            height_pt = img2pdf.mm_to_pt(page.height_mm)
            # Page and image share one size: full bleed at the origin
            return width_pt, height_pt, width_pt, height_pt

        return layout
