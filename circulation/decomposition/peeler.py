from typing import List, NamedTuple

from ..config import PEEL_EPSILON
from ..core.residual import FlowGraph


class PeelRecord(NamedTuple):
    length: int
    amount: float  # bottleneck * length
    bottleneck: float


def cycle_edges(cycle: List[int]):
    n = len(cycle)
    return [(cycle[i], cycle[(i + 1) % n]) for i in range(n)]


def bottleneck(graph: FlowGraph, cycle: List[int]) -> float:
    """Smallest residual amount on the cycle's edges."""
    return min(graph.amount(u, v) for u, v in cycle_edges(cycle))


def peel_cycle(graph: FlowGraph, cycle: List[int], epsilon: float = PEEL_EPSILON) -> PeelRecord:
    """
    Remove the bottleneck flow from every edge of the cycle in place.

    Edges left below epsilon are deleted, so at least the bottleneck edge
    disappears on every call.
    """
    if not cycle:
        raise ValueError("Cannot peel an empty cycle")
    edges = cycle_edges(cycle)
    flow = bottleneck(graph, cycle)
    for u, v in edges:
        graph.reduce(u, v, flow, epsilon)
    return PeelRecord(length=len(cycle), amount=flow * len(cycle), bottleneck=flow)
