"""
Run coordination: discover documents, check every reference, report failures.

Documents are processed one at a time in sorted path order and references in
the order they appear, so the failure stream is reproducible. Failures are
written out as soon as they are found. The only concurrent work is the
optional URL prefetch, which probes all external links up front and leaves
the sequential pass to read cached verdicts.
"""
import functools
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from .discovery import discover_documents
from .documents import Document, DocumentStore
from .errors import FailureKind, MissingFileError
from .references import extract_references
from .resolver import Failure, LinkResolver, Reference, ReferenceKind, classify
from .url_probe import UrlProber
from .verifier_config import config

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a whole run"""
    failures: List[Failure] = field(default_factory=list)
    documents_checked: int = 0
    references_checked: int = 0
    elapsed: float = 0.0

    @property
    def exit_code(self) -> int:
        return 1 if self.failures else 0


class RunCoordinator:
    """Drives extraction and resolution over a set of documents"""

    def __init__(self, verbose: bool = False, debug: bool = False,
                 emit: Callable[[str], None] = functools.partial(print, flush=True),
                 exists: Callable[[str], bool] = os.path.exists,
                 prober: Optional[UrlProber] = None,
                 reachable: Optional[Callable[[str], bool]] = None,
                 discover: Callable[[List[str]], List[str]] = discover_documents,
                 prefetch_urls: bool = None):
        self.debug = debug
        self.verbose = verbose or debug
        self.emit = emit
        self.discover = discover
        self.store = DocumentStore()

        # An explicit reachable oracle replaces the network prober entirely
        if reachable is None:
            self.prober = prober or UrlProber()
            reachable = self.prober.reachable
        else:
            self.prober = None

        self.prefetch_urls = config.prefetch_urls if prefetch_urls is None else prefetch_urls
        self.resolver = LinkResolver(
            exists=exists, reachable=reachable, store=self.store)

    def run(self, paths: Iterable[str] = None) -> RunResult:
        """Check every document under paths (default: the configured root)"""
        start = time.perf_counter()
        roots = list(paths or []) or [config.default_root]
        documents = self.discover(roots)

        result = RunResult()
        if self.prefetch_urls and self.prober is not None:
            self._prefetch(documents)

        for path in documents:
            self.check_document(path, result)

        result.elapsed = time.perf_counter() - start
        logger.info(
            f"Checked {result.references_checked} reference(s) in "
            f"{result.documents_checked} document(s): {len(result.failures)} failure(s) "
            f"in {result.elapsed:.2f}s")
        return result

    def check_document(self, path: str, result: RunResult) -> List[Reference]:
        """Check one document, appending its failures to result"""
        if self.verbose:
            self.emit(f"Verifying: {path}")

        try:
            document = self.store.load(path)
        except OSError as e:
            logger.warning(f"Cannot read {path}: {e}")
            self._record(result, Failure(
                document=path, message=MissingFileError(path).detail,
                kind=FailureKind.FILE_NOT_FOUND))
            return []

        result.documents_checked += 1
        references = []
        for raw_target in extract_references(document.text):
            if self.debug:
                self.emit(f"Found: '{raw_target.strip()}'")
            references.append(self._resolve(document, raw_target, result))
        return references

    def _resolve(self, document: Document, raw_target: str, result: RunResult) -> Reference:
        new_failures: List[Failure] = []
        reference = self.resolver.resolve(document, raw_target, new_failures)
        result.references_checked += 1
        for failure in new_failures:
            self._record(result, failure)
        return reference

    def _record(self, result: RunResult, failure: Failure):
        result.failures.append(failure)
        self.emit(str(failure))

    def _prefetch(self, documents: List[str]):
        urls = []
        for path in documents:
            try:
                document = self.store.load(path)
            except OSError:
                # Reported during the sequential pass
                continue
            for raw_target in extract_references(document.text):
                if classify(raw_target) == ReferenceKind.EXTERNAL:
                    urls.append(raw_target.strip())

        if urls:
            self.prober.prefetch(urls)
            logger.info(f"URL prober stats: {self.prober.get_stats()}")
