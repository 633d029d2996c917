import pytest

from s3.errors import GraphIntegrityError
from s3.graph import (
    ResourceGraph,
    ResourceKind,
    ResourceNode,
    structural_dependencies,
)


def _node(kind: ResourceKind, depends_on=None) -> ResourceNode:
    if depends_on is None:
        depends_on = structural_dependencies(kind)
    return ResourceNode(
        kind=kind,
        name='minio',
        namespace='default',
        payload={},
        depends_on=frozenset(depends_on),
    )


@pytest.fixture
def graph() -> ResourceGraph:
    return ResourceGraph(_node(kind) for kind in ResourceKind)


def _kinds(nodes):
    return [node.kind for node in nodes]


def test_structural_edges():
    assert structural_dependencies(ResourceKind.WORKLOAD) == {
        ResourceKind.CONFIG,
        ResourceKind.SECRET,
    }
    assert structural_dependencies(ResourceKind.ROUTING) == {
        ResourceKind.SERVICE,
        ResourceKind.CERTIFICATE,
    }
    assert structural_dependencies(ResourceKind.CERTIFICATE) == frozenset()


def test_apply_order_puts_dependencies_first(graph):
    assert _kinds(graph.apply_order()) == [
        ResourceKind.CONFIG,
        ResourceKind.SECRET,
        ResourceKind.SERVICE,
        ResourceKind.CERTIFICATE,
        ResourceKind.WORKLOAD,
        ResourceKind.ROUTING,
    ]


def test_every_dependency_precedes_its_dependent(graph):
    order = _kinds(graph.apply_order())
    for node in graph:
        for dependency in node.depends_on:
            assert order.index(dependency) < order.index(node.kind)


def test_teardown_order_is_reversed(graph):
    assert graph.teardown_order() == list(reversed(graph.apply_order()))
    assert _kinds(graph.teardown_order())[:2] == [ResourceKind.ROUTING, ResourceKind.WORKLOAD]


def test_layers_group_independent_nodes(graph):
    assert [_kinds(layer) for layer in graph.layers()] == [
        [
            ResourceKind.CONFIG,
            ResourceKind.SECRET,
            ResourceKind.SERVICE,
            ResourceKind.CERTIFICATE,
        ],
        [ResourceKind.WORKLOAD, ResourceKind.ROUTING],
    ]


def test_dependents(graph):
    assert _kinds(graph.dependents(ResourceKind.CERTIFICATE)) == [ResourceKind.ROUTING]
    assert _kinds(graph.dependents(ResourceKind.CONFIG)) == [ResourceKind.WORKLOAD]
    assert graph.dependents(ResourceKind.ROUTING) == []


def test_container_protocol(graph):
    assert len(graph) == len(ResourceKind)
    assert ResourceKind.SECRET in graph
    assert graph[ResourceKind.SECRET].kind == ResourceKind.SECRET


def test_dangling_edge_is_rejected():
    graph = ResourceGraph([_node(ResourceKind.CONFIG), _node(ResourceKind.WORKLOAD)])

    with pytest.raises(GraphIntegrityError, match='secret'):
        graph.validate()


def test_cycle_is_rejected():
    graph = ResourceGraph(
        [
            _node(ResourceKind.SERVICE, depends_on={ResourceKind.ROUTING}),
            _node(ResourceKind.CERTIFICATE),
            _node(ResourceKind.ROUTING),
        ]
    )

    with pytest.raises(GraphIntegrityError, match='Cycle'):
        graph.apply_order()


def test_duplicate_kind_is_rejected():
    graph = ResourceGraph([_node(ResourceKind.CONFIG)])

    with pytest.raises(GraphIntegrityError, match='Duplicate'):
        graph.add(_node(ResourceKind.CONFIG))
