"""Tests for graph construction and dependency resolution."""

import pytest

from specatlas.errors import DuplicateSpecError, SpecNotFoundError
from specatlas.graph import DanglingDependency, GraphBuilder, Resolution, build_graph
from tests.spec_helpers import graph_from, ids, make_spec


class TestGraphBuilder:
    """Tests for GraphBuilder."""

    def test_node_set_equals_corpus(self):
        graph = graph_from({"A": [], "B": ["A", "missing"], "C": []})
        assert graph.node_count() == 3
        assert ids(graph.all_specs()) == ["A", "B", "C"]

    def test_exact_edge_both_directions(self):
        graph = graph_from({"A": [], "B": ["A"]})
        assert ids(graph.dependencies_of("B")) == ["A"]
        assert ids(graph.dependents_of("A")) == ["B"]

    def test_no_declared_deps_means_empty(self):
        graph = graph_from({"A": [], "B": ["A"]})
        assert graph.dependencies_of("A") == ()
        assert graph.upstream("A") == ()

    def test_builder_add_specs_incrementally(self):
        builder = GraphBuilder()
        builder.add_spec(make_spec("A"))
        builder.add_specs([make_spec("B", depends_on=["A"])])
        graph = builder.build()
        assert graph.edge_count() == 1

    def test_duplicate_id_raises(self):
        with pytest.raises(DuplicateSpecError, match="A"):
            build_graph([make_spec("A"), make_spec("A")])

    def test_duplicate_references_collapse(self):
        graph = graph_from({"A": [], "B": ["A", "A", " A "]})
        assert graph.edge_count() == 1
        assert ids(graph.dependencies_of("B")) == ["A"]


class TestNumericResolution:
    """Tests for numeric-prefix fallback."""

    def test_bare_number_resolves(self):
        graph = graph_from({"001-auth": [], "002-search": ["001"], "003-ui": ["2"]})
        assert ids(graph.dependencies_of("002-search")) == ["001-auth"]
        assert ids(graph.dependencies_of("003-ui")) == ["002-search"]

    def test_edge_records_resolution(self):
        graph = graph_from({"001-auth": [], "002-search": ["001"], "003-ui": ["001-auth"]})
        resolutions = {(e.source_id, e.resolution) for e in graph.iter_edges()}
        assert ("002-search", Resolution.NUMBER) in resolutions
        assert ("003-ui", Resolution.EXACT) in resolutions

    def test_exact_match_wins_over_number(self):
        graph = graph_from({"7": [], "007-bond": [], "010-x": ["7"]})
        assert ids(graph.dependencies_of("010-x")) == ["7"]

    def test_partial_prefix_is_not_numeric(self):
        graph = graph_from({"001-auth": [], "002-x": ["001-au"]})
        assert graph.dependencies_of("002-x") == ()
        assert graph.dangling_dependencies() == [DanglingDependency("002-x", "001-au")]

    def test_first_spec_owns_shared_number(self):
        graph = graph_from({"001-a": [], "001-b": [], "002-x": ["1"]})
        assert ids(graph.dependencies_of("002-x")) == ["001-a"]

    @pytest.mark.parametrize("ref", ["\u00b2", "\u0663", "1" * 5000])
    def test_non_ascii_or_oversized_digits_are_dangling(self, ref):
        graph = build_graph([make_spec("001-a", depends_on=[ref])])
        assert graph.dependencies_of("001-a") == ()
        assert graph.dangling_dependencies() == [DanglingDependency("001-a", ref)]


class TestDanglingDependencies:
    """Tests for unresolved references."""

    def test_dangling_is_recorded_not_fatal(self):
        graph = graph_from({"A": ["ghost"], "B": ["A"]})
        assert graph.has_dangling_dependencies()
        assert graph.dangling_dependencies() == [DanglingDependency("A", "ghost")]
        assert graph.edge_count() == 1

    def test_dangling_str(self):
        assert str(DanglingDependency("A", "ghost")) == "A --[depends_on]--> ghost (missing)"

    def test_no_dangling(self):
        graph = graph_from({"A": []})
        assert not graph.has_dangling_dependencies()


class TestLookup:
    """Tests for get() and resolve()."""

    def test_unknown_id_raises_lookup_error(self):
        graph = graph_from({"A": []})
        with pytest.raises(SpecNotFoundError) as exc_info:
            graph.dependents_of("Z")
        assert exc_info.value.spec_id == "Z"
        assert isinstance(exc_info.value, LookupError)

    def test_resolve_by_number(self):
        graph = graph_from({"001-auth": [], "042-search": []})
        assert graph.resolve("42").id == "042-search"
        assert graph.resolve("042-search").id == "042-search"

    def test_resolve_missing(self):
        graph = graph_from({"001-auth": []})
        with pytest.raises(SpecNotFoundError):
            graph.resolve("99")

    def test_resolve_superscript_digit_is_not_found(self):
        graph = graph_from({"002-auth": []})
        with pytest.raises(SpecNotFoundError):
            graph.resolve("\u00b2")

    def test_core_lookup_is_exact(self):
        graph = graph_from({"001-auth": []})
        with pytest.raises(SpecNotFoundError):
            graph.get("1")
