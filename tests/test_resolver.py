import os

import pytest

from link_verifier.anchors import MatchMethod
from link_verifier.documents import Document, DocumentStore
from link_verifier.errors import FailureKind
from link_verifier.resolver import LinkResolver, ReferenceKind, classify


class FakeNetwork:
    """Network oracle that records every URL it is asked about"""

    def __init__(self, reachable=True):
        self._reachable = reachable
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        return self._reachable


@pytest.fixture
def resolver():
    return LinkResolver(exists=os.path.exists, reachable=FakeNetwork(True),
                        store=DocumentStore(), document_extensions=(".md",))


def doc(path, text=""):
    return Document(path=path, text=text)


@pytest.mark.parametrize("target, kind", [
    ("mailto:a@b.com", ReferenceKind.MAILTO),
    ("http://example.com", ReferenceKind.EXTERNAL),
    ("https://example.com/page#section", ReferenceKind.EXTERNAL),
    ("  #usage ", ReferenceKind.SAME_FILE_ANCHOR),
    ("guide.md#install", ReferenceKind.CROSS_FILE_ANCHOR),
    ("../README.md", ReferenceKind.PLAIN_PATH),
    ("mailto-notes.md", ReferenceKind.PLAIN_PATH),
])
def test_classify(target, kind):
    assert classify(target) == kind


def test_mailto_never_fails():
    network = FakeNetwork(False)
    resolver = LinkResolver(exists=lambda p: False, reachable=network)
    failures = []

    ref = resolver.resolve(doc("docs/a.md"), "mailto:a@b.com", failures)

    assert ref.resolved
    assert failures == []
    assert network.calls == []


def test_unreachable_url_is_one_failure():
    resolver = LinkResolver(exists=os.path.exists, reachable=FakeNetwork(False))
    failures = []

    ref = resolver.resolve(doc("docs/a.md"), "http://example.invalid", failures)

    assert not ref.resolved
    assert len(failures) == 1
    assert failures[0].kind == FailureKind.URL_UNREACHABLE
    assert str(failures[0]) == "docs/a.md: Can't load: url http://example.invalid"


def test_reachable_url_has_no_failure():
    network = FakeNetwork(True)
    resolver = LinkResolver(exists=os.path.exists, reachable=network)
    failures = []

    ref = resolver.resolve(doc("docs/a.md"), " http://example.invalid ", failures)

    assert ref.resolved
    assert failures == []
    assert network.calls == ["http://example.invalid"]


def test_missing_plain_path(tmp_path, monkeypatch, resolver):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    failures = []

    resolver.resolve(doc("docs/a.md"), "./missing.md", failures)

    assert len(failures) == 1
    assert failures[0].kind == FailureKind.FILE_NOT_FOUND
    assert failures[0].message == f"Can't find: {os.path.join('docs', 'missing.md')}"


def test_existing_plain_path(tmp_path, monkeypatch, resolver):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    (tmp_path / "README.md").write_text("# Readme\n")
    failures = []

    ref = resolver.resolve(doc("docs/a.md"), "../README.md", failures)

    assert ref.resolved
    assert failures == []


def test_missing_same_file_section(write_doc, resolver):
    path = write_doc("a.md", "# Intro\n# Usage\n")
    failures = []

    resolver.resolve(resolver.store.load(path), "#no-such-section", failures)

    assert len(failures) == 1
    assert failures[0].kind == FailureKind.ANCHOR_NOT_FOUND
    assert failures[0].message == f"Can't find section '#no-such-section' in {path}"


def test_same_file_section_found(write_doc, resolver):
    path = write_doc("a.md", "# Intro\n## Usage\n")
    failures = []

    ref = resolver.resolve(resolver.store.load(path), "#usage", failures)

    assert ref.resolved
    assert ref.match.anchor.slug == "usage"
    assert failures == []


def test_cross_file_section(write_doc, resolver):
    a = write_doc("docs/a.md", "[x](../guide.md#configure-it)\n")
    write_doc("guide.md", "# Guide\n## Configure it!\n")
    failures = []

    ref = resolver.resolve(resolver.store.load(a), "../guide.md#configure-it", failures)

    assert ref.kind == ReferenceKind.CROSS_FILE_ANCHOR
    assert ref.resolved
    assert ref.match.method == MatchMethod.EXACT


def test_cross_file_section_in_missing_file(write_doc, resolver, tmp_path):
    a = write_doc("a.md", "")
    failures = []

    resolver.resolve(resolver.store.load(a), "gone.md#intro", failures)

    assert len(failures) == 1
    assert failures[0].kind == FailureKind.FILE_NOT_FOUND
    assert failures[0].message == f"Can't find: {tmp_path / 'gone.md'}"


def test_cross_file_section_missing_in_existing_file(write_doc, resolver, tmp_path):
    a = write_doc("a.md", "")
    write_doc("b.md", "# Only heading\n")
    failures = []

    resolver.resolve(resolver.store.load(a), "b.md#other", failures)

    assert failures[0].kind == FailureKind.ANCHOR_NOT_FOUND
    assert failures[0].message == f"Can't find section '#other' in {tmp_path / 'b.md'}"


def test_duplicate_suffix_resolves_against_base(write_doc, resolver):
    path = write_doc("a.md", "# Example\n")
    failures = []

    ref = resolver.resolve(resolver.store.load(path), "#example-2", failures)

    assert ref.resolved
    assert ref.match.method == MatchMethod.BASE


def test_line_anchor_into_source_file(write_doc, resolver):
    a = write_doc("a.md", "")
    write_doc("tool.py", "# not a heading\nprint('hi')\n")
    failures = []

    ref = resolver.resolve(resolver.store.load(a), "tool.py#L2", failures)

    assert ref.resolved
    assert ref.match is None
    assert failures == []


def test_line_anchor_into_missing_source_file(write_doc, resolver):
    a = write_doc("a.md", "")
    failures = []

    resolver.resolve(resolver.store.load(a), "tool.py#L2-L10", failures)

    assert failures[0].kind == FailureKind.FILE_NOT_FOUND


def test_anchor_table_is_built_once(write_doc, resolver):
    path = write_doc("a.md", "# Intro\n")
    document = resolver.store.load(path)
    failures = []

    resolver.resolve(document, "#intro", failures)
    table = resolver.store.anchors(path)
    resolver.resolve(document, "#intro", failures)

    assert resolver.store.anchors(path) is table
    assert failures == []
