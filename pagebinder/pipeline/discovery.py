# pagebinder/pipeline/discovery.py
# ============================================================
# Candidate Discovery — Flat Directory Scan
# ============================================================
# Lists the regular files of one directory whose names end in a
# recognized image extension. Subdirectories are never entered.
#
# Usage:
#   from pagebinder.pipeline.discovery import list_candidates
#   candidates = list_candidates(Path("."))
# ============================================================

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

from config.settings import settings
from pagebinder.errors import DirectoryReadError


@dataclass(frozen=True)
class CandidateFile:
    """
    A file that looks like a page image.

    Attributes:
        name: File name, used for ordering and reporting.
        path: Full path used to open the file.
    """
    name: str
    path: Path

    def open(self) -> BinaryIO:
        return self.path.open("rb")


def has_image_extension(
    name: str,
    extensions: Iterable[str],
    case_sensitive: bool = True,
) -> bool:
    """Whether ``name`` ends with one of ``extensions``."""
    if case_sensitive:
        return name.endswith(tuple(extensions))
    lowered = name.lower()
    return lowered.endswith(tuple(ext.lower() for ext in extensions))


def list_candidates(
    directory: Path,
    extensions: Optional[Iterable[str]] = None,
    case_sensitive: Optional[bool] = None,
) -> list[CandidateFile]:
    """
    Scan ``directory`` (non-recursively) for image files.

    The result is in directory-listing order; sequencing is the
    assembler's job.

    Args:
        directory: Directory to scan.
        extensions: Recognized suffixes. Default: from settings.
        case_sensitive: Exact suffix match. Default: from settings.

    Returns:
        CandidateFile entries for regular files with an image suffix.

    Raises:
        DirectoryReadError: If the directory cannot be listed.
    """
    extensions = frozenset(extensions) if extensions is not None else settings.image_extensions
    if case_sensitive is None:
        case_sensitive = settings.case_sensitive_extensions

    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise DirectoryReadError(f"cannot read directory {directory}: {e}") from e

    return [
        CandidateFile(name=entry.name, path=entry)
        for entry in entries
        if entry.is_file() and has_image_extension(entry.name, extensions, case_sensitive)
    ]
