"""Composite-integer keys naming vertices that may not exist yet.

A key is a 4-slot tuple of non-negative integers. Every used slot stores
``original_index + 1`` so that ``0`` always means "unused". Python compares
tuples lexicographically, which is the total order the flag resolver sorts,
deduplicates and binary-searches by.

Operators compose keys so that two faces sharing an edge or vertex compute the
*same* key for the *same* logical new point, no matter which face (or which
traversal direction) produced it. Tagged keys put a small integer (the ASCII
code of an operator letter) in the first slot.
"""

from __future__ import annotations

from typing import Tuple

__all__ = [
    "Key",
    "UNUSED",
    "key1",
    "key2",
    "key3",
    "key4",
    "edge_key",
    "face_edge_key",
    "tag",
]

Key = Tuple[int, int, int, int]

UNUSED: Key = (0, 0, 0, 0)


def tag(letter: str) -> int:
    """Integer tag for an operator letter (its code point)."""
    if len(letter) != 1:
        raise ValueError(f"Key tags are single characters, got {letter!r}")
    return ord(letter)


def key1(a: int) -> Key:
    return (a + 1, 0, 0, 0)


def key2(a: int, b: int) -> Key:
    return (a + 1, b + 1, 0, 0)


def key3(a: int, b: int, c: int) -> Key:
    return (a + 1, b + 1, c + 1, 0)


def key4(a: int, b: int, c: int, d: int) -> Key:
    return (a + 1, b + 1, c + 1, d + 1)


def edge_key(a: int, b: int) -> Key:
    """Undirected edge key: ``edge_key(a, b) == edge_key(b, a)``."""
    return key2(a, b) if a < b else key2(b, a)


def face_edge_key(face: int, a: int, b: int) -> Key:
    """Undirected edge key scoped to one face."""
    return key3(face, a, b) if a < b else key3(face, b, a)
