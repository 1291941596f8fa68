from decimal import Decimal

import pytest

from circulation.core.residual import FlowGraph, validate_nodes
from circulation.decomposition.cycle_finder import cycle_labels, find_cycle
from circulation.decomposition.peeler import bottleneck, peel_cycle
from circulation.errors import InvalidFlowInputError


def graph_of(*edges):
    return FlowGraph.from_edges([{"source": s, "target": t, "amount": a} for s, t, a in edges])


def test_flow_graph_sums_duplicates_and_tracks_total():
    g = graph_of(("A", "B", 1), ("A", "B", 2.5), ("B", "C", 4))
    assert g.total_flow == 7.5
    assert g.edge_count == 2
    assert g.amount(g.index_of("A"), g.index_of("B")) == 3.5


def test_flow_graph_indexes_nodes_in_first_seen_order():
    g = graph_of(("X", "Y", 1), ("Z", "X", 1))
    assert [g.label(i) for i in range(len(g))] == ["X", "Y", "Z"]
    assert list(g.sources()) == [g.index_of("X"), g.index_of("Z")]


def test_flow_graph_skips_zero_edges():
    g = graph_of(("A", "B", 0), ("B", "C", 2))
    assert "A" not in {s for s, _, _ in g.edges()}
    assert g.edge_count == 1
    assert g.total_flow == 2


def test_validate_nodes_accepts_strings_and_mappings():
    validate_nodes(["A", {"id": "B"}])
    validate_nodes(None)
    with pytest.raises(InvalidFlowInputError):
        validate_nodes([{"name": "A"}])
    with pytest.raises(InvalidFlowInputError):
        validate_nodes([""])


def test_flow_graph_accepts_decimal_amounts():
    g = graph_of(("A", "B", Decimal("2.50")), ("A", "B", Decimal("0.25")))
    assert g.total_flow == pytest.approx(2.75)
    assert isinstance(g.amount(g.index_of("A"), g.index_of("B")), float)


@pytest.mark.parametrize("amount", [Decimal("NaN"), Decimal("sNaN"), Decimal("Infinity"), Decimal("-1")])
def test_flow_graph_rejects_bad_decimal_amounts(amount):
    with pytest.raises(InvalidFlowInputError):
        graph_of(("A", "B", amount))


def test_find_cycle_on_dag_returns_none():
    g = graph_of(("A", "B", 1), ("B", "C", 1), ("A", "C", 1))
    assert find_cycle(g) is None


def test_find_cycle_returns_path_suffix_in_order():
    # A -> B -> C -> D -> B: the cycle starts where the path is re-entered
    g = graph_of(("A", "B", 1), ("B", "C", 1), ("C", "D", 1), ("D", "B", 1))
    cycle = find_cycle(g)
    assert cycle_labels(g, cycle) == ["B", "C", "D"]


def test_find_cycle_self_loop():
    g = graph_of(("A", "B", 1), ("B", "B", 3))
    assert cycle_labels(g, find_cycle(g)) == ["B"]


def test_find_cycle_skips_sinks_and_explored_branches():
    # C is a sink, E -> A reaches already explored nodes only
    g = graph_of(("A", "C", 1), ("E", "A", 1), ("F", "G", 1), ("G", "F", 1))
    assert cycle_labels(g, find_cycle(g)) == ["F", "G"]


def test_find_cycle_cycle_edges_exist():
    g = graph_of(("A", "B", 1), ("B", "C", 1), ("C", "A", 1), ("C", "D", 1), ("D", "A", 1))
    cycle = find_cycle(g)
    for i, u in enumerate(cycle):
        v = cycle[(i + 1) % len(cycle)]
        assert v in g.successors(u)
    assert len(set(cycle)) == len(cycle)


def test_peel_removes_bottleneck_edge_and_reduces_others():
    g = graph_of(("A", "B", 100), ("B", "C", 50), ("C", "A", 10))
    cycle = find_cycle(g)
    assert bottleneck(g, cycle) == 10

    record = peel_cycle(g, cycle)
    assert record.length == 3
    assert record.bottleneck == 10
    assert record.amount == 30

    a, b, c = (g.index_of(x) for x in "ABC")
    assert g.amount(a, b) == 90
    assert g.amount(b, c) == 40
    assert not g.has_outgoing(c)
    assert g.edge_count == 2
    assert find_cycle(g) is None


def test_peel_drops_numerical_dust():
    g = graph_of(("A", "B", 1.0), ("B", "A", 1.0 + 1e-12))
    record = peel_cycle(g, find_cycle(g))
    assert record.amount == pytest.approx(2.0)
    assert g.edge_count == 0
    assert g.residual_flow() == 0


def test_peel_self_loop():
    g = graph_of(("A", "A", 7))
    record = peel_cycle(g, find_cycle(g))
    assert record == (1, 7.0, 7.0)
    assert list(g.sources()) == []


def test_peel_empty_cycle_is_rejected():
    with pytest.raises(ValueError):
        peel_cycle(graph_of(("A", "B", 1)), [])


def test_to_networkx_snapshot():
    g = graph_of(("A", "B", 2), ("B", "C", 3))
    G = g.to_networkx()
    assert set(G.nodes()) == {"A", "B", "C"}
    assert G["B"]["C"]["remaining"] == 3


@pytest.mark.parametrize("epsilon", [0.0, -1.0])
def test_peel_drops_spent_edges_without_positive_epsilon(epsilon):
    g = graph_of(("A", "B", 5.0), ("B", "A", 5.0))
    record = peel_cycle(g, find_cycle(g), epsilon=epsilon)
    assert record.amount == 10.0
    assert list(g.edges()) == []
    assert g.edge_count == 0
    assert find_cycle(g) is None


def test_reduce_keeps_only_positive_amounts():
    g = graph_of(("A", "B", 3.0), ("B", "C", 1.0))
    a, b = g.index_of("A"), g.index_of("B")
    assert g.reduce(a, b, 1.0, epsilon=0.0) is False
    assert g.amount(a, b) == 2.0
    assert g.reduce(a, b, 2.0, epsilon=0.0) is True
    assert all(remaining > 0 for _, _, remaining in g.edges())
