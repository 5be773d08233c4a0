"""
Reference classification and resolution.

A raw link target is classified purely by its shape:

    mailto:a@b.com          -> MAILTO             never checked
    https://example.com     -> EXTERNAL           network oracle
    #usage                  -> SAME_FILE_ANCHOR   current document's anchors
    guide.md#install        -> CROSS_FILE_ANCHOR  other document's anchors
    ../README.md            -> PLAIN_PATH         filesystem oracle

Every unresolved reference becomes exactly one Failure, appended to the list
the caller owns, in resolution order.
"""
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .anchors import AnchorMatch
from .documents import Document, DocumentStore
from .errors import (
    FailureKind, MissingAnchorError, MissingFileError, ResolutionError,
    UnreachableUrlError,
)
from .url_probe import UrlProber
from .verifier_config import config

logger = logging.getLogger(__name__)

# GitHub-style source line anchors: #L10 or #L10-L20
_LINE_ANCHOR_RE = re.compile(r"^L\d+(-L\d+)?$")


class ReferenceKind(Enum):
    """Lexical kind of a link target"""
    MAILTO = "mailto"
    EXTERNAL = "external"
    SAME_FILE_ANCHOR = "same_file_anchor"
    CROSS_FILE_ANCHOR = "cross_file_anchor"
    PLAIN_PATH = "plain_path"


@dataclass(frozen=True)
class Failure:
    """One unresolved reference, as reported to the user"""
    document: str
    message: str
    kind: FailureKind

    def __str__(self) -> str:
        return f"{self.document}: {self.message}"


@dataclass
class Reference:
    """A link found in a document, and what became of it"""
    document: str
    raw_target: str
    kind: ReferenceKind
    resolved: bool = False
    failure_kind: Optional[FailureKind] = None
    detail: Optional[str] = None
    match: Optional[AnchorMatch] = None

    @property
    def target(self) -> str:
        return self.raw_target.strip()


def classify(target: str) -> ReferenceKind:
    """Classify a raw target by its shape alone"""
    target = target.strip()
    if target.startswith('mailto:'):
        return ReferenceKind.MAILTO
    if target.startswith('http'):
        return ReferenceKind.EXTERNAL
    if '#' in target:
        if target.split('#', 1)[0] == '':
            return ReferenceKind.SAME_FILE_ANCHOR
        return ReferenceKind.CROSS_FILE_ANCHOR
    return ReferenceKind.PLAIN_PATH


def resolve_path(directory: str, relative: str) -> str:
    """Join a reference to the referring document's directory"""
    return os.path.normpath(os.path.join(directory, relative))


class LinkResolver:
    """Resolves references against the filesystem, the network and anchor tables"""

    def __init__(self, exists: Callable[[str], bool] = os.path.exists,
                 reachable: Callable[[str], bool] = None,
                 store: DocumentStore = None,
                 document_extensions=None):
        if reachable is None:
            reachable = UrlProber().reachable
        self.exists = exists
        self.reachable = reachable
        self.store = store or DocumentStore()
        self.document_extensions = tuple(
            document_extensions or config.document_extensions_list)

    def resolve(self, document: Document, raw_target: str,
                failures: List[Failure]) -> Reference:
        """Resolve one reference; append a Failure to failures if it does not resolve"""
        kind = classify(raw_target)
        reference = Reference(
            document=document.path, raw_target=raw_target, kind=kind)
        logger.debug(
            f"{document.path}: '{reference.target}' classified as {kind.value}")

        try:
            if kind == ReferenceKind.MAILTO:
                pass
            elif kind == ReferenceKind.EXTERNAL:
                self._check_url(reference.target)
            elif kind in (ReferenceKind.SAME_FILE_ANCHOR, ReferenceKind.CROSS_FILE_ANCHOR):
                reference.match = self._check_anchor(document, reference)
            else:
                self._check_path(document, reference.target)
            reference.resolved = True
        except ResolutionError as e:
            reference.failure_kind = e.kind
            reference.detail = e.detail
            failures.append(Failure(
                document=document.path, message=e.detail, kind=e.kind))

        return reference

    def _check_url(self, url: str):
        if not self.reachable(url):
            raise UnreachableUrlError(url)

    def _check_path(self, document: Document, target: str):
        path = resolve_path(document.directory, target)
        if not self.exists(path):
            raise MissingFileError(path)

    def _check_anchor(self, document: Document, reference: Reference) -> Optional[AnchorMatch]:
        file_part, fragment = reference.target.split('#', 1)
        fragment = fragment.strip()

        if reference.kind == ReferenceKind.SAME_FILE_ANCHOR:
            path = document.path
        else:
            path = resolve_path(document.directory, file_part.strip())
            if not self._is_document(path) and _LINE_ANCHOR_RE.match(fragment):
                if not self.exists(path):
                    raise MissingFileError(path)
                return None

        try:
            table = self.store.anchors(path)
        except OSError as e:
            logger.debug(f"Cannot read anchor target {path}: {e}")
            raise MissingFileError(path)

        match = table.match(fragment)
        if match is None:
            raise MissingAnchorError(fragment, path)
        return match

    def _is_document(self, path: str) -> bool:
        return path.lower().endswith(self.document_extensions)
