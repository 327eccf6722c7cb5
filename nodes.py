"""
Node value type for pathtrace.

Position is carried for external rendering only; the engine never reads it.
"""

from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class Node:
    """Graph vertex identified by an opaque, hashable id."""

    id: Hashable
    name: str = ""
    x: float = 0.0
    y: float = 0.0
