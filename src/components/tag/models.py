"""Tag component models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CreateTagInput:
    name: str
