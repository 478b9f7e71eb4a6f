# novel_scout/__init__.py
"""
NovelScout package initializer.
Defines package version; the CLI lives in :mod:`novel_scout.cli`.
"""
__version__ = "0.1.0"
