import itertools
import random

import pytest

from app.core.errors import CyclicDependencyError
from app.services.dependency_graph import (
    build_dependency_graph,
    common_start_time_layers,
    find_cycle,
    is_acyclic,
    layer_index,
    to_dot,
    topological_order,
)


def assert_valid_layers(pairs, layers):
    nodes = [node for layer in layers for node in layer]
    assert len(nodes) == len(set(nodes))
    assert set(nodes) == {topic for topic, _ in pairs}
    index = layer_index(layers)
    for topic, depends_on in pairs:
        for prerequisite in depends_on:
            if prerequisite != "0":
                assert index[topic] >= index[prerequisite]


def test_fan_out_from_a_single_prerequisite():
    pairs = [("A", ["0"]), ("B", ["A"]), ("C", ["A"])]
    graph = build_dependency_graph(pairs)

    assert is_acyclic(graph)
    order = topological_order(graph)
    assert order.index("A") < order.index("B")
    assert order.index("A") < order.index("C")
    assert common_start_time_layers(graph) == [["A"], ["B", "C"]]


def test_reversed_graph_peels_prerequisites_first():
    graph = build_dependency_graph([("A", "0"), ("B", "A"), ("C", "A")])
    reverse = graph.reversed()
    assert reverse.out_degree("A") == 0
    assert reverse.out_degree("B") == 1
    assert graph.out_degree("A") == 2


def test_two_topics_depending_on_each_other():
    graph = build_dependency_graph([("B", ["A"]), ("A", ["B"])])

    assert not is_acyclic(graph)
    assert sorted(find_cycle(graph)) == ["A", "B"]
    with pytest.raises(CyclicDependencyError) as excinfo:
        common_start_time_layers(graph)
    assert "cycles" in excinfo.value.message
    with pytest.raises(CyclicDependencyError):
        topological_order(graph)


def test_self_dependency_is_a_cycle():
    graph = build_dependency_graph([(1, [1])])
    assert find_cycle(graph) == [1]


def test_sentinel_keeps_the_topic_as_a_lone_node():
    graph = build_dependency_graph([(1, ["0"]), (2, [0]), (3, None), (4, "0")])
    assert graph.nodes == [1, 2, 3, 4]
    assert graph.edges() == []
    assert common_start_time_layers(graph) == [[1, 2, 3, 4]]


def test_string_ids_are_normalized():
    graph = build_dependency_graph([(2, ["1"]), (1, ["0"])])
    assert graph.edges() == [(1, 2)]


def test_label_function_builds_graph_by_name():
    names = {1: "Ruby basics", 2: "Rails routing"}
    graph = build_dependency_graph([(1, ["0"]), (2, [1])], names.get)
    assert graph.nodes == ["Ruby basics", "Rails routing"]
    assert graph.edges() == [("Ruby basics", "Rails routing")]


def test_longest_chain_decides_the_layer():
    pairs = [("A", ["0"]), ("B", ["A"]), ("C", ["B"]), ("D", ["A", "C"]), ("E", ["0"])]
    layers = common_start_time_layers(build_dependency_graph(pairs))
    assert layers == [["A", "E"], ["B"], ["C"], ["D"]]
    assert_valid_layers(pairs, layers)


def test_each_round_uses_degrees_from_the_start_of_the_round():
    # C only loses its last prerequisite after B leaves, so it must wait a round
    pairs = [("A", ["0"]), ("B", ["A"]), ("C", ["B"])]
    assert common_start_time_layers(build_dependency_graph(pairs)) == [["A"], ["B"], ["C"]]


def random_dag(seed, size=8):
    rng = random.Random(seed)
    pairs = []
    for position in range(size):
        prerequisites = [f"t{other}" for other in range(position) if rng.random() < 0.3]
        pairs.append((f"t{position}", prerequisites or ["0"]))
    rng.shuffle(pairs)
    return pairs


@pytest.mark.parametrize("seed", range(10))
def test_random_dags_layer_and_sort_consistently(seed):
    pairs = random_dag(seed)
    graph = build_dependency_graph(pairs)

    assert is_acyclic(graph)
    order = topological_order(graph)
    for topic, depends_on in pairs:
        for prerequisite in depends_on:
            if prerequisite != "0":
                assert order.index(prerequisite) < order.index(topic)
    assert_valid_layers(pairs, common_start_time_layers(graph))


@pytest.mark.parametrize("size", [2, 3, 5])
def test_ring_is_always_detected(size):
    nodes = [f"t{i}" for i in range(size)]
    pairs = [(nodes[i], [nodes[i - 1]]) for i in range(size)]
    graph = build_dependency_graph(pairs)
    assert not is_acyclic(graph)
    cycle = find_cycle(graph)
    assert sorted(cycle) == sorted(nodes)
    for current, following in zip(cycle, itertools.chain(cycle[1:], cycle[:1])):
        assert (current, following) in graph.edges()


def test_dot_export_marks_cycle_edges():
    graph = build_dependency_graph([("B", ["A"]), ("A", ["B"]), ("C", ["A"])])
    dot = to_dot(graph, find_cycle(graph))
    assert dot.startswith("digraph topic_dependencies {")
    assert '"A" -> "B" [color=red];' in dot
    assert '"B" -> "A" [color=red];' in dot
    assert '"A" -> "C";' in dot


def test_dot_export_escapes_quotes():
    graph = build_dependency_graph([('Say "hi"', ["0"])])
    assert '"Say \\"hi\\""' in to_dot(graph)
