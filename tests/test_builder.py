"""Tests for DependencyGraphBuilder: hand-built projects and small trees on disk."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from repograph.dependencies import DependencyGraphBuilder, mermaid_safe_id, render_mermaid
from repograph.exceptions import GraphNotBuiltError, ProjectNotFoundError
from repograph.graph import DirectedGraph
from repograph.scanner import Project, ProjectMarker


def _project(
    tmp_path: Path,
    name: str,
    deps: dict[str, str] | None = None,
    *,
    dev: dict[str, str] | None = None,
    rel: str | None = None,
) -> Project:
    directory = tmp_path / (rel or name.replace("@", "").replace("/", "-"))
    directory.mkdir(parents=True, exist_ok=True)
    return Project(
        path=os.path.realpath(directory),
        directory=os.path.realpath(directory),
        name=name,
        marker=ProjectMarker.TLC_CONFIG,
        dependencies=deps or {},
        dev_dependencies=dev or {},
    )


class TestBuild:
    def test_workspace_dependency_orders_dependency_first(self, tmp_path):
        q = _project(tmp_path, "q")
        p = _project(tmp_path, "p", {"q": "workspace:*"})
        builder = DependencyGraphBuilder()
        graph = builder.build([p, q])

        assert graph.to_adjacency() == {p.path: [q.path], q.path: []}
        assert builder.topological_order() == [q.path, p.path]
        assert builder.detect_cycles().has_cycles is False

    def test_registry_dependencies_are_not_edges(self, tmp_path):
        core = _project(tmp_path, "core")
        app = _project(tmp_path, "app", {"core": "^1.0.0", "react": "^18.0.0"})
        graph = DependencyGraphBuilder().build([app, core])
        assert graph.graph.edge_count == 0

    def test_file_protocol_resolves_by_directory(self, tmp_path):
        shared = _project(tmp_path, "@acme/shared", rel="shared")
        app = _project(tmp_path, "app", {"shared-alias": "file:../shared"}, rel="app")
        graph = DependencyGraphBuilder().build([app, shared])
        assert graph.dependencies_of(app.path) == [shared.path]

    def test_file_protocol_falls_back_to_name(self, tmp_path):
        shared = _project(tmp_path, "shared", rel="libs/shared")
        app = _project(tmp_path, "app", {"shared": "file:../elsewhere"}, rel="app")
        graph = DependencyGraphBuilder().build([app, shared])
        assert graph.dependencies_of(app.path) == [shared.path]

    def test_unresolved_local_dependency_dropped(self, tmp_path):
        app = _project(tmp_path, "app", {"ghost": "workspace:*", "gone": "file:../gone"})
        graph = DependencyGraphBuilder().build([app])
        assert graph.to_adjacency() == {app.path: []}

    def test_dev_dependencies_count(self, tmp_path):
        utils = _project(tmp_path, "test-utils")
        app = _project(tmp_path, "app", dev={"test-utils": "workspace:^"})
        graph = DependencyGraphBuilder().build([app, utils])
        assert graph.dependencies_of(app.path) == [utils.path]

    def test_self_dependency_kept_as_cycle(self, tmp_path):
        me = _project(tmp_path, "me", {"me": "workspace:*"})
        builder = DependencyGraphBuilder()
        builder.build([me])
        report = builder.detect_cycles()
        assert report.cycle_count == 1
        assert report.cycles[0].nodes == (me.path,)

    def test_duplicate_identity_ignored(self, tmp_path):
        a = _project(tmp_path, "a")
        graph = DependencyGraphBuilder().build([a, a])
        assert graph.nodes == [a.path]

    def test_duplicate_name_first_wins(self, tmp_path):
        first = _project(tmp_path, "dup", rel="one")
        second = _project(tmp_path, "dup", rel="two")
        app = _project(tmp_path, "app", {"dup": "workspace:*"})
        with capture_logs() as logs:
            graph = DependencyGraphBuilder().build([first, second, app])
        assert graph.dependencies_of(app.path) == [first.path]
        assert any(e["event"] == "graph.duplicate_name" for e in logs)

    def test_rebuild_replaces_graph(self, tmp_path):
        a = _project(tmp_path, "a")
        b = _project(tmp_path, "b")
        builder = DependencyGraphBuilder()
        builder.build([a, b])
        builder.build([a])
        assert builder.graph.nodes == [a.path]


class TestCyclesAndAffected:
    @pytest.fixture
    def triangle(self, tmp_path):
        a = _project(tmp_path, "A", {"B": "workspace:*"})
        b = _project(tmp_path, "B", {"C": "workspace:*"})
        c = _project(tmp_path, "C", {"A": "workspace:*"})
        builder = DependencyGraphBuilder()
        builder.build([a, b, c])
        return builder, a, b, c

    def test_three_node_cycle_reported(self, triangle):
        builder, a, b, c = triangle
        report = builder.detect_cycles()
        assert report.has_cycles is True
        assert set(report.cycles[0].nodes) == {a.path, b.path, c.path}

    def test_visualization_uses_project_names(self, triangle):
        builder, *_ = triangle
        assert builder.detect_cycles().visualization.splitlines()[0] == "Cycle 1: A -> B -> C -> A"

    def test_affected_covers_cycle(self, triangle):
        builder, a, b, c = triangle
        assert builder.get_affected("A") >= {b.path, c.path}
        assert a.path not in builder.get_affected(a.path)

    def test_order_is_a_permutation(self, triangle):
        builder, a, b, c = triangle
        assert sorted(builder.topological_order()) == sorted([a.path, b.path, c.path])


class TestQueries:
    @pytest.fixture
    def chain(self, tmp_path):
        core = _project(tmp_path, "@acme/core")
        lib = _project(tmp_path, "@acme/lib", {"@acme/core": "workspace:*"})
        app = _project(tmp_path, "app", {"@acme/lib": "workspace:*", "@acme/core": "workspace:*"})
        builder = DependencyGraphBuilder()
        builder.build([core, lib, app])
        return builder, core, lib, app

    def test_lookup_by_name_or_identity(self, chain):
        builder, core, lib, app = chain
        assert builder.resolve("@acme/core") == core.path
        assert builder.resolve(core.path) == core.path

    def test_dependencies_and_dependents(self, chain):
        builder, core, lib, app = chain
        assert builder.get_dependencies("app") == [lib.path, core.path]
        assert sorted(builder.get_dependents("@acme/core")) == sorted([lib.path, app.path])
        assert builder.get_dependents("app") == []

    def test_affected(self, chain):
        builder, core, lib, app = chain
        assert builder.get_affected("@acme/core") == {lib.path, app.path}
        assert builder.get_affected("app") == set()

    def test_unknown_project(self, chain):
        builder, *_ = chain
        with pytest.raises(ProjectNotFoundError) as exc_info:
            builder.get_affected("nope")
        assert exc_info.value.project_id == "nope"

    def test_query_before_build(self):
        builder = DependencyGraphBuilder()
        with pytest.raises(GraphNotBuiltError):
            builder.topological_order()
        with pytest.raises(GraphNotBuiltError):
            builder.get_dependencies("x")


class TestImportEdges:
    def test_imports_add_edges_when_enabled(self, tmp_path):
        core = _project(tmp_path, "@acme/core")
        web = _project(tmp_path, "web")
        src = Path(web.directory) / "src"
        src.mkdir()
        (src / "index.ts").write_text(
            "import { x } from '@acme/core/utils';\nconst pad = require('left-pad');\n"
        )

        builder = DependencyGraphBuilder(scan_imports=True)
        graph = builder.build([core, web])
        assert graph.dependencies_of(web.path) == [core.path]
        assert graph.projects[web.path].imported_packages == ["@acme/core"]
        # scanned projects are copies; the input is left untouched
        assert web.imported_packages == []

    def test_imports_ignored_when_disabled(self, tmp_path):
        core = _project(tmp_path, "@acme/core")
        web = _project(tmp_path, "web")
        (Path(web.directory) / "index.js").write_text("require('@acme/core');\n")
        graph = DependencyGraphBuilder().build([core, web])
        assert graph.graph.edge_count == 0

    def test_unknown_imported_package_dropped(self, tmp_path):
        app = _project(tmp_path, "app")
        app.imported_packages = ["lodash"]
        graph = DependencyGraphBuilder().build([app])
        assert graph.to_adjacency() == {app.path: []}

    def test_rebuild_without_imported_project(self, tmp_path):
        core = _project(tmp_path, "@acme/core")
        web = _project(tmp_path, "web")
        (Path(web.directory) / "index.js").write_text("require('@acme/core');\n")
        first = DependencyGraphBuilder(scan_imports=True).build([core, web])
        scanned_web = first.projects[web.path]
        assert scanned_web.imported_packages == ["@acme/core"]

        graph = DependencyGraphBuilder().build([scanned_web])
        assert graph.graph.edge_count == 0

    def test_manifest_and_import_edge_collapse(self, tmp_path):
        core = _project(tmp_path, "core")
        web = _project(tmp_path, "web", {"core": "workspace:*"})
        (Path(web.directory) / "index.js").write_text("import c from 'core';\n")
        graph = DependencyGraphBuilder(scan_imports=True).build([core, web])
        assert graph.graph.edge_count == 1


class TestDiagram:
    def test_safe_ids(self):
        assert mermaid_safe_id("/ws/@acme/core-lib.v2") == "_ws__acme_core_lib_v2"
        assert mermaid_safe_id("plain_id9") == "plain_id9"

    def test_render(self):
        g = DirectedGraph.from_adjacency({"apps/web": ["libs/ui"], "libs/ui": []})
        text = render_mermaid(g, {"apps/web": "web", "libs/ui": '"ui"'})
        assert text.splitlines() == [
            "graph TD",
            '    apps_web["web"]',
            '    libs_ui["#quot;ui#quot;"]',
            "    apps_web --> libs_ui",
        ]

    def test_empty_graph(self):
        assert render_mermaid(DirectedGraph()) == "graph TD"

    def test_builder_diagram_labels_with_names(self, tmp_path):
        core = _project(tmp_path, "@acme/core")
        builder = DependencyGraphBuilder()
        builder.build([core])
        assert f'{mermaid_safe_id(core.path)}["@acme/core"]' in builder.to_diagram()
