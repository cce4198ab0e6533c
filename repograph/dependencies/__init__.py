"""Dependency graph builder: project-to-project edges from manifests and imports."""

from repograph.dependencies.builder import DependencyGraphBuilder
from repograph.dependencies.diagram import mermaid_safe_id, render_mermaid
from repograph.dependencies.imports import extract_imports, package_name
from repograph.dependencies.models import DependencyGraph

__all__ = [
    "DependencyGraph",
    "DependencyGraphBuilder",
    "extract_imports",
    "mermaid_safe_id",
    "package_name",
    "render_mermaid",
]
