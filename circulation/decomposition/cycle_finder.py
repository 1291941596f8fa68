"""
Cycle finder: locates one elementary directed cycle in the residual graph.

Iterative DFS so long payment chains never hit the recursion limit. Each
node is expanded at most once per call; a cycle is reported as soon as an
edge re-enters the current path.
"""
from typing import Dict, Iterator, List, Optional, Set

from ..core.residual import FlowGraph


def find_cycle(graph: FlowGraph) -> Optional[List[int]]:
    """
    Return one cycle as a list of node indices in path order, or None when
    the residual graph is acyclic. Edge v[i] -> v[i+1 mod n] exists for every i.
    """
    visited: Set[int] = set()
    on_path: Set[int] = set()

    for start in list(graph.sources()):
        if start in visited:
            continue

        path = [start]
        frontier: Dict[int, Iterator[int]] = {start: iter(graph.successors(start))}
        visited.add(start)
        on_path.add(start)

        while path:
            u = path[-1]
            v = next(frontier[u], None)

            if v is None:
                path.pop()
                on_path.discard(u)
                continue

            if v in on_path:
                # Self-loop lands here with v == u
                return path[path.index(v):]

            if v not in visited and graph.has_outgoing(v):
                visited.add(v)
                on_path.add(v)
                path.append(v)
                frontier[v] = iter(graph.successors(v))

    return None


def cycle_labels(graph: FlowGraph, cycle: List[int]) -> List[str]:
    return [graph.label(idx) for idx in cycle]
