"""Topic dependency graph.

Nodes are stored in an arena: each label gets a stable integer index in
insertion order and edges are kept as index sets. Edges point from the
prerequisite to the dependent topic (``depends_on -> topic``), so a
topological order lists prerequisites first.
"""
import heapq
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Set, Tuple

from app.core.errors import CyclicDependencyError

# "0" is what the sign-up form posts for a topic without dependencies
NO_DEPENDENCY = (None, 0, "0", "")

WHITE, GREY, BLACK = 0, 1, 2


class DependencyGraph:
    def __init__(self) -> None:
        self._labels: List[Hashable] = []
        self._index: Dict[Hashable, int] = {}
        self._successors: List[Set[int]] = []
        self._predecessors: List[Set[int]] = []

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label: Hashable) -> bool:
        return label in self._index

    def __iter__(self):
        return iter(self._labels)

    @property
    def nodes(self) -> List[Hashable]:
        return list(self._labels)

    def add_node(self, label: Hashable) -> int:
        if label not in self._index:
            self._index[label] = len(self._labels)
            self._labels.append(label)
            self._successors.append(set())
            self._predecessors.append(set())
        return self._index[label]

    def add_edge(self, prerequisite: Hashable, dependent: Hashable) -> None:
        source = self.add_node(prerequisite)
        target = self.add_node(dependent)
        self._successors[source].add(target)
        self._predecessors[target].add(source)

    def edges(self) -> List[Tuple[Hashable, Hashable]]:
        return [
            (self._labels[source], self._labels[target])
            for source in range(len(self._labels))
            for target in sorted(self._successors[source])
        ]

    def prerequisites(self, label: Hashable) -> List[Hashable]:
        return [self._labels[i] for i in sorted(self._predecessors[self._index[label]])]

    def dependents(self, label: Hashable) -> List[Hashable]:
        return [self._labels[i] for i in sorted(self._successors[self._index[label]])]

    def out_degree(self, label: Hashable) -> int:
        return len(self._successors[self._index[label]])

    def reversed(self) -> "DependencyGraph":
        graph = DependencyGraph()
        for label in self._labels:
            graph.add_node(label)
        for prerequisite, dependent in self.edges():
            graph.add_edge(dependent, prerequisite)
        return graph


def _normalize(value: Any) -> Any:
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def build_dependency_graph(
    pairs: Iterable[Tuple[Any, Any]],
    label: Optional[Callable[[Any], Hashable]] = None,
) -> DependencyGraph:
    """Build a fresh graph from ``(topic, depends_on)`` pairs.

    ``depends_on`` may be a single value or a list of them; the "no
    dependency" sentinel is skipped but the topic itself still becomes a node.
    ``label`` maps a topic identifier to the node label, e.g. the topic name
    for the diagnostic export.
    """
    name = label or (lambda node: node)
    graph = DependencyGraph()
    for topic, depends_on in pairs:
        topic = _normalize(topic)
        graph.add_node(name(topic))
        for prerequisite in _as_list(depends_on):
            prerequisite = _normalize(prerequisite)
            if prerequisite in NO_DEPENDENCY:
                continue
            graph.add_edge(name(prerequisite), name(topic))
    return graph


def find_cycle(graph: DependencyGraph) -> Optional[List[Hashable]]:
    """Return the labels along one directed cycle, or None for a DAG."""
    successors = graph._successors
    color = [WHITE] * len(graph)
    for root in range(len(graph)):
        if color[root] != WHITE:
            continue
        color[root] = GREY
        stack = [(root, iter(sorted(successors[root])))]
        while stack:
            node, children = stack[-1]
            for child in children:
                if color[child] == GREY:
                    path = [entry[0] for entry in stack]
                    return [graph._labels[i] for i in path[path.index(child):]]
                if color[child] == WHITE:
                    color[child] = GREY
                    stack.append((child, iter(sorted(successors[child]))))
                    break
            else:
                color[node] = BLACK
                stack.pop()
    return None


def is_acyclic(graph: DependencyGraph) -> bool:
    return find_cycle(graph) is None


def topological_order(graph: DependencyGraph) -> List[Hashable]:
    """Kahn's algorithm; ties go to the node inserted first."""
    in_degree = [len(predecessors) for predecessors in graph._predecessors]
    ready = [node for node, degree in enumerate(in_degree) if degree == 0]
    heapq.heapify(ready)
    order = []
    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for child in sorted(graph._successors[node]):
            in_degree[child] -= 1
            if in_degree[child] == 0:
                heapq.heappush(ready, child)

    if len(order) != len(graph):
        raise CyclicDependencyError(find_cycle(graph))
    return [graph._labels[node] for node in order]


def common_start_time_layers(graph: DependencyGraph) -> List[List[Hashable]]:
    """Peel the edge-reversed graph into sets of topics that share a start time.

    In the reversed graph a vertex has out-degree zero once none of its
    prerequisites remain. Every round works on a degree snapshot taken before
    anything is removed, then removes the whole round at once.
    """
    cycle = find_cycle(graph)
    if cycle is not None:
        raise CyclicDependencyError(cycle)

    reverse = graph.reversed()
    alive = [True] * len(reverse)
    remaining = len(reverse)
    layers = []
    while remaining:
        out_degree = [0] * len(reverse)
        for node in range(len(reverse)):
            if alive[node]:
                out_degree[node] = sum(1 for target in reverse._successors[node] if alive[target])

        layer = [node for node in range(len(reverse)) if alive[node] and out_degree[node] == 0]
        for node in layer:
            alive[node] = False
        remaining -= len(layer)
        layers.append([reverse._labels[node] for node in layer])
    return layers


def layer_index(layers: List[List[Hashable]]) -> Dict[Hashable, int]:
    return {label: position for position, layer in enumerate(layers) for label in layer}


def _quote(label: Any) -> str:
    return '"' + str(label).replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_dot(graph: DependencyGraph, highlight: Optional[List[Hashable]] = None) -> str:
    """Render the graph as Graphviz DOT, drawing the edges of ``highlight`` (a cycle) in red."""
    cycle_edges = set()
    if highlight:
        cycle_edges = {(highlight[i], highlight[(i + 1) % len(highlight)]) for i in range(len(highlight))}

    lines = ["digraph topic_dependencies {"]
    for label in graph.nodes:
        lines.append(f"  {_quote(label)};")
    for prerequisite, dependent in graph.edges():
        attributes = " [color=red]" if (prerequisite, dependent) in cycle_edges else ""
        lines.append(f"  {_quote(prerequisite)} -> {_quote(dependent)}{attributes};")
    lines.append("}")
    return "\n".join(lines) + "\n"
