"""
Anchor tables: the set of section anchors a document exposes.

Heading anchors are slugged and disambiguated the way markdown renderers do
it: the first "Example" heading is #example, the next ones are #example-1,
#example-2 and so on. Explicit <a name="..."> anchors are kept verbatim.

Matching a requested fragment tolerates the differences between renderer
conventions and hand-written links. Attempts run in a fixed order and the
first hit wins:

1. exact    - the fragment is a key of the table
2. wildcard - case-insensitive containment: the fragment may sit anywhere
              inside a key, and hyphens inside the fragment match any run
              of characters, so #faq-what-is-it still finds
              "faq--what-is-it" after the slugger stripped punctuation
              around a separator
3. base     - a trailing -N (1-3 digits) is treated as a duplicate counter
              and stripped, then matched exactly
4. base-wildcard - the stripped fragment matched as a wildcard
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional

from .headings import HeadingScan
from .slugs import slugify

logger = logging.getLogger(__name__)

_DUPLICATE_SUFFIX_RE = re.compile(r"^(.+)-(\d{1,3})$")


class AnchorSource(Enum):
    """Where an anchor came from"""
    HEADING = "heading"
    EXPLICIT = "explicit"


class MatchMethod(Enum):
    """Which attempt resolved a fragment"""
    EXACT = "exact"
    WILDCARD = "wildcard"
    BASE = "base"
    BASE_WILDCARD = "base_wildcard"


@dataclass(frozen=True)
class Anchor:
    """A jump target inside one document"""
    slug: str
    document: str
    source: AnchorSource
    heading_position: Optional[int] = None  # index into the document's headings
    occurrence: int = 0  # 0 for the first heading with this base slug


@dataclass(frozen=True)
class AnchorMatch:
    """Result of a successful fragment lookup"""
    anchor: Anchor
    method: MatchMethod


class AnchorTable:
    """Immutable slug -> Anchor mapping for one document"""

    def __init__(self, document: str, anchors: Dict[str, Anchor]):
        self.document = document
        self._anchors = dict(anchors)
        # Case-insensitive view, first registration wins
        self._folded: Dict[str, Anchor] = {}
        for slug, anchor in self._anchors.items():
            self._folded.setdefault(slug.lower(), anchor)

    @classmethod
    def build(cls, document: str, scan: HeadingScan) -> 'AnchorTable':
        """Build the table from a document's headings and explicit anchors"""
        anchors: Dict[str, Anchor] = {}
        seen: Dict[str, int] = {}

        for heading in scan.headings:
            base = slugify(heading.text)
            count = seen.get(base, 0)
            slug = base if count == 0 else f"{base}-{count}"
            # A literal heading like "Example 1" may already own "example-1"
            while slug in anchors:
                count += 1
                slug = f"{base}-{count}"
            seen[base] = count + 1
            anchors[slug] = Anchor(
                slug=slug,
                document=document,
                source=AnchorSource.HEADING,
                heading_position=heading.position,
                occurrence=count,
            )

        for name in scan.explicit_anchors:
            if name not in anchors:
                anchors[name] = Anchor(
                    slug=name, document=document, source=AnchorSource.EXPLICIT)

        logger.debug(
            f"Built anchor table for {document}: {len(scan.headings)} headings, "
            f"{len(scan.explicit_anchors)} explicit anchors, {len(anchors)} slugs")
        return cls(document, anchors)

    def __getitem__(self, slug: str) -> Anchor:
        return self._anchors[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._anchors)

    def slugs(self) -> list:
        """All slugs in registration order"""
        return list(self._anchors)

    def match(self, fragment: str) -> Optional[AnchorMatch]:
        """Resolve a link fragment (without the leading '#') to an anchor"""
        fragment = (fragment or '').strip().lower()
        if not fragment:
            return None

        attempts = [
            (MatchMethod.EXACT, fragment, False),
            (MatchMethod.WILDCARD, fragment, True),
        ]
        m = _DUPLICATE_SUFFIX_RE.match(fragment)
        if m:
            base = m.group(1)
            attempts.append((MatchMethod.BASE, base, False))
            attempts.append((MatchMethod.BASE_WILDCARD, base, True))

        for method, candidate, wildcard in attempts:
            anchor = self._find_wildcard(
                candidate) if wildcard else self._folded.get(candidate)
            if anchor is not None:
                logger.debug(
                    f"Fragment '#{fragment}' matched '{anchor.slug}' in {self.document} ({method.value})")
                return AnchorMatch(anchor=anchor, method=method)

        return None

    def _find_wildcard(self, fragment: str) -> Optional[Anchor]:
        core = fragment.strip('-')
        start = fragment.index(core)
        lead, trail = fragment[:start], fragment[start + len(core):]
        pattern = re.compile(
            re.escape(lead)
            + '.*'.join(re.escape(p) for p in core.split('-'))
            + re.escape(trail))
        for key, anchor in self._folded.items():
            if pattern.search(key):
                return anchor
        return None
