"""
Heading text to anchor slug conversion
"""
import re

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^-a-z0-9]")


def slugify(text: str) -> str:
    """
    Convert raw heading text into the anchor a markdown renderer generates.

    Lowercase, each whitespace run becomes one hyphen, then anything that is
    not an ASCII letter, digit or hyphen is dropped:

        >>> slugify("Hello, World!")
        'hello-world'
    """
    slug = text.lower()
    slug = _WHITESPACE_RE.sub("-", slug)
    return _NON_SLUG_RE.sub("", slug)
