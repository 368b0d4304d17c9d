# pagebinder/document/__init__.py
# ============================================================
# Document Package
# ============================================================
# The in-progress output document of a run.
#
# Key classes:
#   - Document: append-only page sequence rendered to PDF
# ============================================================

from pagebinder.document.model import Document

__all__ = ["Document"]
