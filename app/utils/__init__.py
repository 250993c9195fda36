# app/utils/__init__.py
from __future__ import annotations

from app.utils.text import sanitize_filename, split_lines, truncate
from app.utils.timeit import timeit

__all__ = ["sanitize_filename", "split_lines", "truncate", "timeit"]
