"""
Heading and explicit anchor extraction from markdown text.

Headings are detected line by line: any line whose first non-blank character
is '#' is a heading, whatever follows the run of '#' characters is its text.
Explicit anchors are HTML tags such as <a name="install"> or <a id="install">,
which documents use next to (or instead of) headings.
"""
import re
from dataclasses import dataclass, field
from typing import List

MAX_HEADING_LEVEL = 6

_HEADING_RE = re.compile(r"^\s*(#+)(.*)$")
_EXPLICIT_ANCHOR_RE = re.compile(
    r"""<a\s+(?:[^>]*?\s)?(?:name|id)\s*=\s*(["'])(.*?)\1""", re.IGNORECASE)


@dataclass
class Heading:
    """A heading line in a document"""
    level: int
    text: str
    position: int  # 0-based index among the document's headings
    line: int = 0  # 1-based source line


@dataclass
class HeadingScan:
    """Everything the anchor table needs from one document"""
    headings: List[Heading] = field(default_factory=list)
    explicit_anchors: List[str] = field(default_factory=list)


def extract_headings(text: str) -> HeadingScan:
    """Scan document text for headings and explicit anchor declarations"""
    scan = HeadingScan()

    for lineno, line in enumerate(text.splitlines(), start=1):
        m = _HEADING_RE.match(line)
        if m:
            level = min(len(m.group(1)), MAX_HEADING_LEVEL)
            scan.headings.append(Heading(
                level=level,
                text=m.group(2).strip(),
                position=len(scan.headings),
                line=lineno,
            ))

        for a in _EXPLICIT_ANCHOR_RE.finditer(line):
            name = a.group(2).strip()
            if name:
                scan.explicit_anchors.append(name)

    return scan
