"""Integration tests.

These run the whole alias-loader pass against Composer projects laid
out on disk.  Run only the fast unit tests with ``pytest tests/unit/``.
"""
from __future__ import annotations
