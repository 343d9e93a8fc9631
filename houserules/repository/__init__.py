"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services avoid SQL strings.
Single-row lookups return None on absence; callers decide what that means.
"""
from __future__ import annotations
