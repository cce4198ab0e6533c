"""Custom exceptions for repograph."""


class RepoGraphError(Exception):
    """Base exception for all repograph errors."""


class UnknownNodeError(RepoGraphError):
    """Raised when an edge references a node the graph does not contain."""

    def __init__(self, node: object):
        self.node = node
        super().__init__(f"Unknown graph node: {node!r}")


class ProjectNotFoundError(RepoGraphError):
    """Raised when a project id or name is not part of the built graph."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found in dependency graph: {project_id}")


class GraphNotBuiltError(RepoGraphError):
    """Raised when a graph query runs before build()."""
