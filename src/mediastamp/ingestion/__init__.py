"""Directory discovery for mediastamp runs."""

from .discovery import DirectoryScanner

__all__ = ["DirectoryScanner"]
