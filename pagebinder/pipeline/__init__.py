# pagebinder/pipeline/__init__.py
# ============================================================
# Pipeline Package
# ============================================================
# Contains the DocumentAssembler that ties discovery, ordering,
# normalization and the document together into one run.
#
# Key classes:
#   - DocumentAssembler: directory -> sorted pages -> PDF
#   - BindResult: pages, skipped files and timing of one run
#   - CandidateFile: an image file found in the directory
# ============================================================

from pagebinder.pipeline.assembler import (
    BindResult,
    DocumentAssembler,
    SkippedFile,
    default_output_path,
    write_pdf,
)
from pagebinder.pipeline.discovery import CandidateFile, has_image_extension, list_candidates

__all__ = [
    "BindResult",
    "CandidateFile",
    "DocumentAssembler",
    "SkippedFile",
    "default_output_path",
    "has_image_extension",
    "list_candidates",
    "write_pdf",
]
