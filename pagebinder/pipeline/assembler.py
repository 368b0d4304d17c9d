# pagebinder/pipeline/assembler.py
# ============================================================
# Document Assembler — End-to-End Directory to PDF
# ============================================================
# Ties discovery, ordering, normalization and the document
# together: directory -> candidates -> sorted -> pages -> PDF.
#
# Design Decisions:
#   1. Per-file failures (DecodeError, EncodeError) are logged and
#      the file is skipped. The page sequence stays contiguous.
#   2. Sequential processing: pages are produced strictly in sorted
#      order, one file at a time.
#   3. The PDF is written to a temporary file next to the target
#      and renamed into place, so a failed run leaves no half file.
#
# Usage:
#   from pagebinder.pipeline.assembler import DocumentAssembler
#   assembler = DocumentAssembler()
#   result = assembler.bind(Path("scans"))
#   print(result.output_path, result.page_count)
# ============================================================

import json
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

import img2pdf
from rich.markup import escape

from config.settings import Ordering, settings
from pagebinder.document.model import Document
from pagebinder.errors import NormalizationError, OutputWriteError
from pagebinder.imaging.normalizer import ImageNormalizer, NormalizedPage
from pagebinder.ordering.natural import natural_key
from pagebinder.pipeline.discovery import CandidateFile, list_candidates
from pagebinder.utils.logger import get_logger

logger = get_logger(__name__)


# ============================================================
# Data Classes
# ============================================================

@dataclass
class SkippedFile:
    """A candidate that did not become a page, and why."""
    name: str
    reason: str
    error_type: str = ""


@dataclass
class BindResult:
    """
    Aggregated result of binding one directory into a PDF.

    Attributes:
        output_path: Where the PDF was written.
        pages: Normalized pages in document order.
        skipped: Candidates that failed normalization.
        total_candidates: Number of image files found.
        total_latency_ms: End-to-end processing time in milliseconds.
        pdf_size_bytes: Size of the written PDF.
    """
    output_path: Optional[Path] = None
    pages: list[NormalizedPage] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    total_candidates: int = 0
    total_latency_ms: float = 0.0
    pdf_size_bytes: int = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def save_json(self, output_path: Union[str, Path]) -> str:
        """
        Save a run report as JSON.

        Includes per-page sizes and the reason every skipped file was
        dropped. Image payloads are not included.

        Args:
            output_path: File path for the output .json file.

        Returns:
            The absolute path to the saved file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "output_path": str(self.output_path) if self.output_path else None,
            "total_candidates": self.total_candidates,
            "page_count": self.page_count,
            "total_latency_ms": round(self.total_latency_ms, 2),
            "pdf_size_bytes": self.pdf_size_bytes,
            "pages": [
                {
                    "page_num": num,
                    "name": page.name,
                    "width_px": page.width_px,
                    "height_px": page.height_px,
                    "width_mm": round(page.width_mm, 4),
                    "height_mm": round(page.height_mm, 4),
                    "jpeg_bytes": len(page.jpeg_bytes),
                }
                for num, page in enumerate(self.pages, start=1)
            ],
            "skipped": [
                {"name": s.name, "reason": s.reason, "error_type": s.error_type}
                for s in self.skipped
            ],
        }

        output_path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(f"Saved report to [bold]{escape(str(output_path))}[/bold]")
        return str(output_path.resolve())


# ============================================================
# Output
# ============================================================

def default_output_path(directory: Path) -> Path:
    """``<directory>/<directory-name>.pdf``"""
    directory = Path(directory).resolve()
    return directory / f"{directory.name}.pdf"


def write_pdf(data: bytes, output_path: Path, atomic: bool = True) -> int:
    """
    Write PDF bytes to ``output_path``, replacing any existing file.

    With ``atomic`` the bytes go to a temporary file in the same
    directory first and are renamed over the target on success.

    Returns:
        Number of bytes written.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    output_path = Path(output_path)
    try:
        if not atomic:
            output_path.write_bytes(data)
            return len(data)

        fd, tmp_name = tempfile.mkstemp(
            dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, output_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise OutputWriteError(f"cannot write {output_path}: {e}") from e

    return len(data)


# ============================================================
# Document Assembler
# ============================================================

class DocumentAssembler:
    """
    Builds one PDF from the images of one directory.

    Flow:
        1. list_candidates() -> list[CandidateFile] (flat scan)
        2. order() -> natural or lexical sequence
        3. ImageNormalizer.normalize_file() per file -> NormalizedPage
        4. Document.add_page() per success, skip + report per failure
        5. Document.finalize() -> to_pdf_bytes() -> write_pdf()

    Example:
        >>> assembler = DocumentAssembler(ordering=Ordering.NATURAL)
        >>> result = assembler.bind(Path("chapter1"))
        >>> result.page_count
        12
    """

    def __init__(
        self,
        normalizer: Optional[ImageNormalizer] = None,
        ordering: Optional[Ordering] = None,
        extensions: Optional[Iterable[str]] = None,
        case_sensitive_extensions: Optional[bool] = None,
        verbose: Optional[bool] = None,
        atomic_write: Optional[bool] = None,
    ):
        """
        Initialize the assembler. Every argument defaults to settings.

        Args:
            normalizer: Pre-configured ImageNormalizer instance.
            ordering: Page ordering (natural or lexical).
            extensions: Recognized image suffixes.
            case_sensitive_extensions: Exact suffix matching.
            verbose: Log each added page at INFO instead of DEBUG.
            atomic_write: Write through a temporary file and rename.
        """
        self.normalizer = normalizer or ImageNormalizer()
        self.ordering = Ordering(ordering) if ordering is not None else settings.ordering
        self.extensions = frozenset(extensions) if extensions is not None else settings.image_extensions
        self.case_sensitive_extensions = (
            case_sensitive_extensions
            if case_sensitive_extensions is not None
            else settings.case_sensitive_extensions
        )
        self.verbose = verbose if verbose is not None else settings.verbose_logging
        self.atomic_write = atomic_write if atomic_write is not None else settings.atomic_write

        if not self.extensions:
            raise ValueError("extensions must not be empty")

    def discover(self, directory: Path) -> list[CandidateFile]:
        """Flat-scan ``directory`` for candidate images (unordered)."""
        return list_candidates(
            directory,
            extensions=self.extensions,
            case_sensitive=self.case_sensitive_extensions,
        )

    def order(self, candidates: Iterable[CandidateFile]) -> list[CandidateFile]:
        """Sort candidates by name using the configured ordering."""
        if self.ordering == Ordering.LEXICAL:
            return sorted(candidates, key=lambda c: c.name)
        return sorted(candidates, key=lambda c: natural_key(c.name))

    def assemble(
        self,
        candidates: Iterable[CandidateFile],
        title: Optional[str] = None,
        on_skip: Optional[Callable[[SkippedFile], None]] = None,
    ) -> Document:
        """
        Turn candidates into a finalized Document, one page per image.

        Candidates are sorted first, so the input order does not matter.
        A file that fails normalization is logged, reported through
        ``on_skip`` and left out; it never aborts the run.

        Args:
            candidates: Image files to bind.
            title: PDF title metadata.
            on_skip: Called with a SkippedFile for each failed candidate.

        Returns:
            The finalized Document.
        """
        document = Document(title=title)
        log_page = logger.info if self.verbose else logger.debug

        for candidate in self.order(candidates):
            log_page(f"Adding image [bold]{escape(candidate.name)}[/bold]")
            try:
                page = self.normalizer.normalize_file(candidate.path)
            except NormalizationError as e:
                logger.warning(
                    f"Skipping [yellow]{escape(candidate.name)}[/yellow]: {escape(e.reason)}"
                )
                if on_skip is not None:
                    on_skip(SkippedFile(candidate.name, e.reason, type(e).__name__))
                continue
            document.add_page(page)

        document.finalize()
        return document

    def bind(self, directory: Path, output_path: Optional[Path] = None) -> BindResult:
        """
        Process a whole directory end-to-end and write the PDF.

        Args:
            directory: Directory holding the page images.
            output_path: Target PDF. Default: <directory>/<name>.pdf.

        Returns:
            BindResult with pages, skipped files and timing.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
            EmptyDocumentError: If no image could be turned into a page.
            OutputWriteError: If the PDF cannot be rendered or written.
        """
        pipeline_start = time.perf_counter()
        directory = Path(directory).resolve()
        output_path = Path(output_path) if output_path is not None else default_output_path(directory)

        logger.info(
            f"Binding [bold]{escape(str(directory))}[/bold] — "
            f"ordering: {self.ordering.value}, quality: {self.normalizer.quality}"
        )

        candidates = self.discover(directory)
        logger.info(f"Found [green]{len(candidates)}[/green] image files")

        result = BindResult(output_path=output_path, total_candidates=len(candidates))
        document = self.assemble(candidates, title=directory.name, on_skip=result.skipped.append)
        result.pages = list(document.pages)

        try:
            pdf_bytes = document.to_pdf_bytes()
        except (img2pdf.ImageOpenError, img2pdf.PdfTooLargeError, ValueError) as e:
            raise OutputWriteError(f"cannot render PDF: {e}") from e

        result.pdf_size_bytes = write_pdf(pdf_bytes, output_path, atomic=self.atomic_write)
        result.total_latency_ms = (time.perf_counter() - pipeline_start) * 1000

        logger.info(
            f"PDF written: [bold]{escape(str(output_path))}[/bold] — "
            f"{result.page_count}/{result.total_candidates} pages, "
            f"{len(result.skipped)} skipped, {result.total_latency_ms:.0f}ms"
        )
        return result
