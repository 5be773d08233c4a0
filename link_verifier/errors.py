"""
Error taxonomy for link verification
"""
from enum import Enum


class FailureKind(Enum):
    """Why a reference could not be resolved"""
    FILE_NOT_FOUND = "file_not_found"
    ANCHOR_NOT_FOUND = "anchor_not_found"
    URL_UNREACHABLE = "url_unreachable"


class LinkVerifierError(Exception):
    """Base class for all verifier errors"""


class UsageError(LinkVerifierError):
    """Bad command line: unknown flag or missing input path"""


class ResolutionError(LinkVerifierError):
    """
    A single reference did not resolve.

    Raised inside the resolver and converted to a Failure there; it never
    aborts a run.
    """
    kind: FailureKind = None

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class MissingFileError(ResolutionError):
    kind = FailureKind.FILE_NOT_FOUND

    def __init__(self, path: str):
        super().__init__(f"Can't find: {path}")
        self.path = path


class MissingAnchorError(ResolutionError):
    kind = FailureKind.ANCHOR_NOT_FOUND

    def __init__(self, fragment: str, path: str):
        super().__init__(f"Can't find section '#{fragment}' in {path}")
        self.fragment = fragment
        self.path = path


class UnreachableUrlError(ResolutionError):
    kind = FailureKind.URL_UNREACHABLE

    def __init__(self, url: str):
        super().__init__(f"Can't load: url {url}")
        self.url = url
