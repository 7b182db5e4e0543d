"""Filename/metadata consistency checks."""

from .engine import ValidationEngine

__all__ = ["ValidationEngine"]
