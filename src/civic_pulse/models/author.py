"""Tagged representation of who authored a piece of content."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identified:
    """Content written by a known account."""

    user_id: int


@dataclass(frozen=True)
class Anonymous:
    """Content submitted without an account; there is nobody to contact."""


Author = Identified | Anonymous
