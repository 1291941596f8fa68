"""
Residual flow graph used by the cycle decomposition.

Nodes are interned into a stable id -> index arena in order of first
appearance (source before target). Each index owns an insertion-ordered
dict of target index -> remaining amount. Only strictly positive amounts are
stored, so an empty dict means the node has no outgoing flow left.
"""
import math
from decimal import Decimal
from numbers import Real
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from ..errors import InvalidFlowInputError

Edge = Tuple[str, str, float]


def _check_node_id(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidFlowInputError(f"Edge {field} must be a non-empty string, got {value!r}")
    return value


def _check_amount(value: Any) -> float:
    # bool is an int subclass; a True amount is a caller bug
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidFlowInputError(f"Edge amount must be a real number, got {value!r}")
    if isinstance(value, Decimal) and not value.is_finite():
        raise InvalidFlowInputError(f"Edge amount must be finite, got {value!r}")
    amount = float(value)
    if math.isnan(amount) or math.isinf(amount):
        raise InvalidFlowInputError(f"Edge amount must be finite, got {value!r}")
    if amount < 0:
        raise InvalidFlowInputError(f"Edge amount must be non-negative, got {value!r}")
    return amount


def normalize_edge(edge: Any) -> Edge:
    """Accept a {source, target, amount} mapping or a 3-tuple and validate it."""
    if isinstance(edge, Mapping):
        try:
            source, target, amount = edge["source"], edge["target"], edge["amount"]
        except KeyError as e:
            raise InvalidFlowInputError(f"Edge is missing key {e.args[0]!r}: {edge!r}") from None
    elif isinstance(edge, Sequence) and not isinstance(edge, str) and len(edge) == 3:
        source, target, amount = edge
    else:
        raise InvalidFlowInputError(f"Edge must be a mapping or (source, target, amount), got {edge!r}")
    return _check_node_id(source, "source"), _check_node_id(target, "target"), _check_amount(amount)


def validate_nodes(nodes: Optional[Iterable[Any]]) -> None:
    """Check that every node is a non-empty id string or an {id: ...} mapping."""
    for node in nodes or []:
        node_id = node.get("id") if isinstance(node, Mapping) else node
        _check_node_id(node_id, "node id")


class FlowGraph:
    """Mutable residual adjacency over an index arena."""

    def __init__(self):
        self._index: Dict[str, int] = {}
        self._labels: List[str] = []
        self._out: List[Dict[int, float]] = []
        self.total_flow = 0.0
        self.edge_count = 0

    @classmethod
    def from_edges(cls, edges: Iterable[Any]) -> "FlowGraph":
        """Validate and sum edges; zero amounts are skipped entirely."""
        graph = cls()
        for raw in edges or []:
            source, target, amount = normalize_edge(raw)
            if amount <= 0:
                continue
            graph._add(source, target, amount)
        return graph

    def _intern(self, node_id: str) -> int:
        idx = self._index.get(node_id)
        if idx is None:
            idx = len(self._labels)
            self._index[node_id] = idx
            self._labels.append(node_id)
            self._out.append({})
        return idx

    def _add(self, source: str, target: str, amount: float) -> None:
        u = self._intern(source)
        v = self._intern(target)
        out = self._out[u]
        if v not in out:
            self.edge_count += 1
        out[v] = out.get(v, 0.0) + amount
        self.total_flow += amount

    # -- arena access ------------------------------------------------------

    def __len__(self) -> int:
        return len(self._labels)

    def label(self, idx: int) -> str:
        return self._labels[idx]

    def index_of(self, node_id: str) -> int:
        return self._index[node_id]

    def successors(self, idx: int) -> Dict[int, float]:
        """Live view of a node's outgoing residual amounts."""
        return self._out[idx]

    def has_outgoing(self, idx: int) -> bool:
        return bool(self._out[idx])

    def sources(self) -> Iterator[int]:
        """Indices that still carry outgoing flow, in first-seen order."""
        return (idx for idx, out in enumerate(self._out) if out)

    def amount(self, u: int, v: int) -> float:
        return self._out[u][v]

    # -- mutation ----------------------------------------------------------

    def reduce(self, u: int, v: int, delta: float, epsilon: float) -> bool:
        """Subtract delta from u->v. Drops the edge and returns True once it is spent or below epsilon."""
        out = self._out[u]
        remaining = out[v] - delta
        if remaining <= 0 or remaining < epsilon:
            del out[v]
            self.edge_count -= 1
            return True
        out[v] = remaining
        return False

    # -- inspection --------------------------------------------------------

    def residual_flow(self) -> float:
        return sum(sum(out.values()) for out in self._out)

    def edges(self) -> Iterator[Edge]:
        for u, out in enumerate(self._out):
            for v, remaining in out.items():
                yield self._labels[u], self._labels[v], remaining

    def to_networkx(self) -> nx.DiGraph:
        """Snapshot of the residual graph with a `remaining` edge attribute."""
        G = nx.DiGraph()
        G.add_nodes_from(self._labels)
        for source, target, remaining in self.edges():
            G.add_edge(source, target, remaining=remaining)
        return G
