"""
Circularity index via greedy cycle peeling.

1. Build the residual graph, summing duplicate (source, target) pairs
2. Find a cycle, peel its bottleneck, record bottleneck * length by length
3. Repeat until the residual graph is a DAG
4. For each minimum cycle length k, sum the peeled flow of cycles >= k

Which cycle is peeled first depends on first-seen node and edge order, so
the breakdown is reproducible for a given input order but not unique.
"""
import logging
import math
from collections import defaultdict
from numbers import Integral, Real
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import DEFAULT_THRESHOLDS, PEEL_EPSILON
from ..core.residual import FlowGraph, validate_nodes
from ..errors import InvalidFlowInputError
from ..models import CircularityResult
from .cycle_finder import cycle_labels, find_cycle
from .peeler import peel_cycle

logger = logging.getLogger(__name__)


def normalize_thresholds(thresholds: Optional[Iterable[Any]]) -> List[int]:
    """Distinct integer thresholds >= 1, input order preserved. None means the configured defaults."""
    if thresholds is None:
        thresholds = DEFAULT_THRESHOLDS
    ks: List[int] = []
    for k in thresholds:
        if isinstance(k, bool) or not isinstance(k, Integral):
            raise InvalidFlowInputError(f"Thresholds must be integers, got {k!r}")
        if k < 1:
            raise InvalidFlowInputError(f"Thresholds must be >= 1, got {k}")
        if int(k) not in ks:
            ks.append(int(k))
    if not ks:
        raise InvalidFlowInputError("At least one threshold is required")
    return ks


def check_epsilon(epsilon: Any) -> float:
    """The dust threshold must be a finite positive number or peeling never terminates."""
    if isinstance(epsilon, bool) or not isinstance(epsilon, Real) or not math.isfinite(epsilon) or epsilon <= 0:
        raise InvalidFlowInputError(f"epsilon must be a finite positive number, got {epsilon!r}")
    return float(epsilon)


def peel_all_cycles(graph: FlowGraph, epsilon: float = PEEL_EPSILON) -> Tuple[Dict[int, float], int]:
    """Peel until acyclic. Returns (exact cycle length -> peeled flow, number of peels)."""
    by_length: Dict[int, float] = defaultdict(float)
    peels = 0
    while True:
        cycle = find_cycle(graph)
        if cycle is None:
            break
        record = peel_cycle(graph, cycle, epsilon)
        by_length[record.length] += record.amount
        peels += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("peel %d: %s bottleneck=%g", peels, cycle_labels(graph, cycle), record.bottleneck)
    return dict(by_length), peels


def aggregate_by_threshold(by_length: Dict[int, float], thresholds: Sequence[int], total_flow: float):
    """Cumulative flow of cycles with length >= k and its share of total flow."""
    ratio: Dict[int, float] = {}
    circular_flow: Dict[int, float] = {}
    for k in thresholds:
        flow = sum(amount for length, amount in by_length.items() if length >= k)
        circular_flow[k] = flow
        ratio[k] = min(flow / total_flow, 1.0) if total_flow > 0 else 0.0
    return ratio, circular_flow


def compute_circularity(
    nodes: Optional[Iterable[Any]],
    edges: Optional[Iterable[Any]],
    thresholds: Optional[Iterable[int]] = None,
    epsilon: float = PEEL_EPSILON,
) -> CircularityResult:
    """
    Split the transacted value of a transfer graph into circular and acyclic flow.

    Args:
        nodes: account ids (or {"id": ...} mappings). Not required to be
            exhaustive; nodes without edges are ignored.
        edges: {source, target, amount} mappings or (source, target, amount)
            tuples. Amounts must be >= 0 (int, float or Decimal); duplicates
            are summed.
        thresholds: minimum cycle lengths to report, default (2, 3, 4, 5).
        epsilon: residual amounts below this are dropped as dust; must be > 0.

    Returns:
        CircularityResult with ratio[k] and circular_flow[k] per threshold.

    Raises:
        InvalidFlowInputError: malformed edge, negative amount, bad threshold
            or non-positive epsilon.
    """
    ks = normalize_thresholds(thresholds)
    epsilon = check_epsilon(epsilon)
    validate_nodes(nodes)
    graph = FlowGraph.from_edges(edges)
    total_flow = graph.total_flow

    if total_flow <= 0:
        return CircularityResult.empty(ks)

    by_length, peels = peel_all_cycles(graph, epsilon)
    ratio, circular_flow = aggregate_by_threshold(by_length, ks, total_flow)

    return CircularityResult(
        ratio=ratio,
        circular_flow=circular_flow,
        total_flow=total_flow,
        residual_flow=graph.residual_flow(),
        flow_by_length=dict(sorted(by_length.items())),
        peel_count=peels,
    )
