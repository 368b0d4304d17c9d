# pagebinder/ordering/__init__.py
# ============================================================
# Ordering Package
# ============================================================
# Sequences candidate files into page order.
#
# Key names:
#   - compare: natural-order three-way comparison of two names
#   - tokenize: split a name into digit / non-digit FileTokens
#   - sort_names: sort with natural or lexical ordering
# ============================================================

from pagebinder.ordering.natural import FileToken, compare, natural_key, sort_names, tokenize

__all__ = ["FileToken", "compare", "natural_key", "sort_names", "tokenize"]
