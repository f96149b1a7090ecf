from __future__ import annotations

"""
Domain Exception Hierarchy.

Separates the failures a caller must handle (missing views, unwritable
output) from the per-node metadata problems that are only ever logged.
"""


class OrgVizError(Exception):
    """Base class for every error raised by orgviz."""


class ViewCompileError(OrgVizError):
    """A view directory could not be walked (listing failed)."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to scan directory '{path}': {reason}")


class OutputWriteError(OrgVizError):
    """A generated artifact could not be written to the output directory."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write '{path}': {reason}")


class ViewNotFoundError(OrgVizError):
    """No compiled artifact exists for the requested view."""

    def __init__(self, view_name: str) -> None:
        self.view_name = view_name
        super().__init__(
            f'View "{view_name}" not found. '
            f"Make sure the view exists in the data directory and run the compiler "
            f"to generate data models."
        )


class ViewLoadError(OrgVizError):
    """A compiled artifact exists but could not be read or decoded."""

    def __init__(self, view_name: str, reason: str) -> None:
        self.view_name = view_name
        self.reason = reason
        super().__init__(f'Failed to load view "{view_name}": {reason}')
