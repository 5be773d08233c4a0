"""
Extraction of [label](target) references from markdown text.

The text is flattened to a single line first so links wrapped across source
lines are still found. The scanner then walks it once:

- a backslash escapes the next character, so \\[ and \\] never open or close
  a label
- inline code spans (a run of backticks closed by a run of the same length)
  are skipped entirely
- an unescaped ']' closing an open '[' and directly followed by '(' starts a
  target, which runs to the matching unescaped ')'

Nested image links such as [![logo](logo.png)](https://example.com) yield
both targets, in the order they appear.
"""
from typing import List, Optional, Tuple


def normalize_whitespace(text: str) -> str:
    """Collapse line breaks to spaces so multi-line links become one token"""
    return text.replace('\r\n', ' ').replace('\r', ' ').replace('\n', ' ')


def _skip_code_span(text: str, start: int) -> int:
    """Return the index just past the code span opened at start, or past the
    backtick run itself when the span is never closed"""
    n = len(text)
    end = start
    while end < n and text[end] == '`':
        end += 1
    run = end - start

    i = end
    while i < n:
        if text[i] != '`':
            i += 1
            continue
        j = i
        while j < n and text[j] == '`':
            j += 1
        if j - i == run:
            return j
        i = j
    return end


def _read_target(text: str, start: int) -> Optional[Tuple[str, int]]:
    """
    Read a link target whose '(' sits at start.

    Returns the raw target and the index after the closing ')', or None when
    the parenthesis is never closed.
    """
    n = len(text)
    depth = 0
    i = start + 1
    while i < n:
        c = text[i]
        if c == '\\':
            i += 2
            continue
        if c == '(':
            depth += 1
        elif c == ')':
            if depth == 0:
                return text[start + 1:i], i + 1
            depth -= 1
        i += 1
    return None


def extract_references(text: str) -> List[str]:
    """Return the raw targets of every [label](target) link, in order"""
    text = normalize_whitespace(text)
    targets: List[str] = []
    open_brackets: List[int] = []

    n = len(text)
    i = 0
    while i < n:
        c = text[i]

        if c == '\\':
            i += 2
            continue

        if c == '`':
            i = _skip_code_span(text, i)
            continue

        if c == '[':
            open_brackets.append(i)
            i += 1
            continue

        if c == ']' and open_brackets:
            open_brackets.pop()
            if i + 1 < n and text[i + 1] == '(':
                found = _read_target(text, i + 1)
                if found is not None:
                    target, i = found
                    targets.append(target)
                    continue
            i += 1
            continue

        i += 1

    return targets
