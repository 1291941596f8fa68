"""
Helmholtz–Hodge circularity.

Older, scalar definition of circularity kept alongside cycle peeling. The
two are different measures and must not be compared number for number.

Flow on each unordered account pair is netted (A->B minus B->A) into one
oriented edge. A node potential phi is fitted by least squares so that the
gradient flow phi[target] - phi[source] matches the edge flows as well as
possible; the leftover is the divergence-free (circular) component:

    f = B @ phi + c,    B = edge-node incidence matrix (-1 source, +1 target)

The gradient and circular parts are orthogonal, so
||c||^2 / ||f||^2 lies in [0, 1] and is the returned ratio.
"""
from typing import Any, Dict, Iterable, Optional, Tuple

import numpy as np

from ..core.residual import normalize_edge, validate_nodes


def net_pair_flows(edges: Iterable[Any]) -> Dict[Tuple[str, str], float]:
    """Net oriented flow per unordered pair, keyed by first-seen orientation. Self-loops dropped."""
    net: Dict[Tuple[str, str], float] = {}
    for raw in edges or []:
        source, target, amount = normalize_edge(raw)
        if source == target or amount <= 0:
            continue
        if (target, source) in net:
            net[(target, source)] -= amount
        else:
            net[(source, target)] = net.get((source, target), 0.0) + amount
    return {pair: flow for pair, flow in net.items() if flow != 0.0}


def hodge_decomposition(edges: Iterable[Any]):
    """
    Returns (pairs, flow, gradient, potential) as numpy arrays aligned with
    `pairs`; `potential` is keyed by account id and has zero mean.
    """
    net = net_pair_flows(edges)
    pairs = list(net)
    index: Dict[str, int] = {}
    for source, target in pairs:
        index.setdefault(source, len(index))
        index.setdefault(target, len(index))

    flow = np.array([net[p] for p in pairs], dtype=float)
    if not pairs:
        return pairs, flow, flow.copy(), {}

    B = np.zeros((len(pairs), len(index)))
    for row, (source, target) in enumerate(pairs):
        B[row, index[source]] = -1.0
        B[row, index[target]] = 1.0

    # lstsq returns the minimum-norm phi, i.e. zero mean on each component
    phi, *_ = np.linalg.lstsq(B, flow, rcond=None)
    gradient = B @ phi
    potential = {node: float(phi[i]) for node, i in index.items()}
    return pairs, flow, gradient, potential


def compute_hodge_circularity(nodes: Optional[Iterable[Any]], edges: Optional[Iterable[Any]]) -> float:
    """Share of flow energy in the circular component, 0.0 for empty or zero input."""
    validate_nodes(nodes)
    _, flow, gradient, _ = hodge_decomposition(edges)
    energy = float(flow @ flow)
    if energy <= 0:
        return 0.0
    circular = flow - gradient
    ratio = float(circular @ circular) / energy
    return min(max(ratio, 0.0), 1.0)
