"""
Dependency graph of the kubernetes objects making up a MinIO deployment.

Nodes are identified by their kind, a deployment has at most one object of
each kind. Edges point from an object to the objects that must exist before
it is applied.
"""

import enum
import typing as t
from collections import deque

from s3.errors import GraphIntegrityError


class ResourceKind(enum.StrEnum):
    CONFIG = 'config'
    SECRET = 'secret'
    WORKLOAD = 'workload'
    SERVICE = 'service'
    CERTIFICATE = 'certificate'
    ROUTING = 'routing'


# The workload reads its environment from config and secret, the ingress
# needs a backend and the TLS secret. Certificate and workload are independent.
STRUCTURAL_EDGES: dict[ResourceKind, frozenset[ResourceKind]] = {
    ResourceKind.WORKLOAD: frozenset({ResourceKind.CONFIG, ResourceKind.SECRET}),
    ResourceKind.ROUTING: frozenset({ResourceKind.SERVICE, ResourceKind.CERTIFICATE}),
}


def structural_dependencies(kind: ResourceKind) -> frozenset[ResourceKind]:
    return STRUCTURAL_EDGES.get(kind, frozenset())


class ResourceNode(t.NamedTuple):
    kind: ResourceKind
    name: str
    namespace: str
    # Kind specific constructor arguments, everything except metadata
    payload: dict[str, t.Any]
    depends_on: frozenset[ResourceKind] = frozenset()
    protect: bool = False


class ResourceGraph:
    def __init__(self, nodes: t.Iterable[ResourceNode] = ()):
        self._nodes: dict[ResourceKind, ResourceNode] = {}
        for node in nodes:
            self.add(node)

    def add(self, node: ResourceNode) -> None:
        if node.kind in self._nodes:
            raise GraphIntegrityError(f"Duplicate node '{node.kind}'")
        self._nodes[node.kind] = node

    def __contains__(self, kind: object) -> bool:
        return kind in self._nodes

    def __getitem__(self, kind: ResourceKind) -> ResourceNode:
        return self._nodes[kind]

    def __iter__(self) -> t.Iterator[ResourceNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def dependents(self, kind: ResourceKind) -> list[ResourceNode]:
        """Nodes that have to wait for `kind`."""
        return [node for node in self if kind in node.depends_on]

    def validate(self) -> None:
        """Raises GraphIntegrityError on dangling edges or cycles."""
        self._check_edges()
        self.apply_order()

    def _check_edges(self) -> None:
        for node in self:
            missing = sorted(node.depends_on - self._nodes.keys())
            if missing:
                raise GraphIntegrityError(
                    f"Node '{node.kind}' depends on unknown node(s): {', '.join(missing)}"
                )

    def apply_order(self) -> list[ResourceNode]:
        """
        Stable topological sort, dependencies first.

        Nodes without an ordering relationship keep their insertion order.
        """
        self._check_edges()

        indegree = {kind: len(node.depends_on) for kind, node in self._nodes.items()}
        queue = deque(kind for kind, degree in indegree.items() if degree == 0)
        order: list[ResourceNode] = []

        while queue:
            kind = queue.popleft()
            order.append(self._nodes[kind])
            for dependent in self.dependents(kind):
                indegree[dependent.kind] -= 1
                if indegree[dependent.kind] == 0:
                    queue.append(dependent.kind)

        if len(order) != len(self._nodes):
            cyclic = [kind for kind, degree in indegree.items() if degree > 0]
            raise GraphIntegrityError(f"Cycle detected among: {', '.join(cyclic)}")

        return order

    def teardown_order(self) -> list[ResourceNode]:
        """Dependents first, the reverse of apply_order."""
        return list(reversed(self.apply_order()))

    def layers(self) -> list[list[ResourceNode]]:
        """
        Groups nodes into waves that can be applied concurrently.

        Every node sits one layer after the deepest of its dependencies.
        """
        depth: dict[ResourceKind, int] = {}
        layers: list[list[ResourceNode]] = []
        for node in self.apply_order():
            level = max((depth[kind] + 1 for kind in node.depends_on), default=0)
            depth[node.kind] = level
            if level == len(layers):
                layers.append([])
            layers[level].append(node)
        return layers
