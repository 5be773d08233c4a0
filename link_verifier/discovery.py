"""
Recursive discovery of markdown documents
"""
import logging
import os
from typing import Iterable, List, Sequence

from .errors import UsageError
from .verifier_config import config

logger = logging.getLogger(__name__)


def _is_excluded(path: str, exclude_dirs: Sequence[str]) -> bool:
    parts = os.path.normpath(path).split(os.sep)
    return any(part in exclude_dirs for part in parts)


def discover_documents(roots: Iterable[str], extensions: Sequence[str] = None,
                       exclude_dirs: Sequence[str] = None) -> List[str]:
    """
    Find every document under the given roots.

    A root may be a directory (walked recursively) or a single file (kept if
    its extension matches). Paths under an excluded directory name are
    skipped. The result is de-duplicated and sorted.

    Raises UsageError if a root does not exist.
    """
    roots = list(roots)
    extensions = tuple(e.lower() for e in (
        extensions if extensions is not None else config.document_extensions_list))
    exclude_dirs = list(
        exclude_dirs if exclude_dirs is not None else config.exclude_dirs_list)

    found = set()
    for root in roots:
        if os.path.isfile(root):
            if root.lower().endswith(extensions) and not _is_excluded(root, exclude_dirs):
                found.add(root)
            continue

        if not os.path.isdir(root):
            raise UsageError(f"No such file or directory: {root}")

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [d for d in dirnames if d not in exclude_dirs]
            if _is_excluded(dirpath, exclude_dirs):
                continue
            for name in filenames:
                if name.lower().endswith(extensions):
                    found.add(os.path.join(dirpath, name))

    documents = sorted(found)
    logger.info(f"Discovered {len(documents)} document(s) under {len(roots)} root(s)")
    return documents
