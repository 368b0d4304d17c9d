# pagebinder/__init__.py
# ============================================================
# pagebinder — Image Directory to PDF
# ============================================================
# Root package. Sub-packages:
#   - pagebinder.ordering  → natural-order file sequencing
#   - pagebinder.imaging   → decode / JPEG re-encode / page sizing
#   - pagebinder.document  → append-only page document, PDF output
#   - pagebinder.pipeline  → discovery + assembler (ties it together)
#   - pagebinder.utils     → shared utilities (logging, image helpers)
# ============================================================

__version__ = "0.1.0"
