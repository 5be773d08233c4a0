"""
Markdown Link Verifier Package

Batch checker for markdown links: files, section anchors and external URLs.
"""

__version__ = "1.0.0"
__author__ = "Docs Tooling Team"
