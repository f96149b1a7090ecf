from __future__ import annotations

"""
Compile Run Data Models.

Defines the result object exchanged between the compiler engine and the
interface layers (CLI, watcher), plus the factory functions that build it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from orgviz.domain.hierarchy_models import Node

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CompileResult:
    """
    Unified result of a complete compile run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        data_dir: Normalized data root that was scanned.
        output_dir: Directory receiving the generated artifacts.
        views: Compiled tree per view name, in view-name order.
        generated_files: Artifact path per view name (plus "index").
        warnings: Non-fatal configuration and metadata warnings.
        summary: Execution statistics.
    """
    ok: bool
    error: str

    data_dir: str
    output_dir: str

    views: Dict[str, Node] = field(default_factory=dict)
    generated_files: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible representation of the result."""
        return {
            "ok": self.ok,
            "error": self.error,
            "data_dir": self.data_dir,
            "output_dir": self.output_dir,
            "views": {name: node.to_dict() for name, node in self.views.items()},
            "generated_files": dict(self.generated_files),
            "warnings": list(self.warnings),
            "summary": dict(self.summary),
        }

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        data_dir: str,
        output_dir: str,
        warnings: Optional[List[str]] = None,
) -> CompileResult:
    """
    Create a failed compile result.

    Args:
        error: Detailed error description.
        data_dir: The scanned data root.
        output_dir: The target output directory.
        warnings: Warnings collected before the failure.

    Returns:
        CompileResult: An immutable error result object.
    """
    return CompileResult(
        ok=False,
        error=error,
        data_dir=data_dir,
        output_dir=output_dir,
        warnings=list(warnings or []),
    )


def create_success_result(
        data_dir: str,
        output_dir: str,
        views: Dict[str, Node],
        generated_files: Dict[str, str],
        warnings: Optional[List[str]] = None,
) -> CompileResult:
    """
    Create a successful compile result with computed statistics.

    Args:
        data_dir: The scanned data root.
        output_dir: The output directory that received the artifacts.
        views: Compiled trees keyed by view name.
        generated_files: Written artifact paths.
        warnings: Non-fatal warnings collected during the run.

    Returns:
        CompileResult: An immutable success result object.
    """
    nodes = 0
    leaves = 0
    for root in views.values():
        for node in root.walk():
            nodes += 1
            if node.is_leaf:
                leaves += 1

    return CompileResult(
        ok=True,
        error="",
        data_dir=data_dir,
        output_dir=output_dir,
        views=dict(views),
        generated_files=dict(generated_files),
        warnings=list(warnings or []),
        summary={"views": len(views), "nodes": nodes, "leaves": leaves},
    )
