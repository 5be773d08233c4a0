"""
Document loading and per-run caches
"""
import logging
import os
from dataclasses import dataclass
from typing import Dict

from .anchors import AnchorTable
from .headings import extract_headings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """A markdown file and its text, read once per run"""
    path: str
    text: str

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)


class DocumentStore:
    """
    Reads documents and builds their anchor tables on demand.

    Both caches are keyed by normalized path and written once per key: a
    document referenced from ten other files is read and indexed once.
    """

    def __init__(self):
        self._documents: Dict[str, Document] = {}
        self._anchor_tables: Dict[str, AnchorTable] = {}

    @staticmethod
    def _key(path: str) -> str:
        return os.path.normpath(path)

    def load(self, path: str) -> Document:
        """Return the document at path; raises OSError if it cannot be read"""
        key = self._key(path)
        document = self._documents.get(key)
        if document is not None:
            return document

        try:
            with open(path, 'r', encoding='utf-8') as fh:
                text = fh.read()
        except UnicodeDecodeError:
            logger.warning(
                f"{path} is not valid UTF-8, undecodable bytes replaced")
            with open(path, 'r', encoding='utf-8', errors='replace') as fh:
                text = fh.read()

        document = Document(path=path, text=text)
        self._documents[key] = document
        return document

    def anchors(self, path: str) -> AnchorTable:
        """Return the anchor table of the document at path, building it lazily"""
        key = self._key(path)
        table = self._anchor_tables.get(key)
        if table is None:
            document = self.load(path)
            table = AnchorTable.build(path, extract_headings(document.text))
            self._anchor_tables[key] = table
        return table
