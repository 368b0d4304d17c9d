# cli/__init__.py
# ============================================================
# Command line entry point for pagebinder (see cli/main.py).
# ============================================================
