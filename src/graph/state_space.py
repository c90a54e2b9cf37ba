"""
State Space for the Vertex Cover Search.

This module defines the immutable graph the evolution runs against. A
``StateSpace`` is built once per map and passed explicitly to every engine
component; nothing in the engine holds it as process-wide state.
"""

from typing import List, Dict, Any, Iterable, Optional, Sequence, Tuple
from dataclasses import dataclass

import numpy as np

from src.core.exceptions import GraphUnavailableError


@dataclass(frozen=True)
class Node:
    """A map node. Coordinates are display data only."""

    id: int
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Edge:
    """An undirected edge, recorded against its ``from_id`` endpoint."""

    from_id: int
    to_id: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return {self.from_id, self.to_id} == {other.from_id, other.to_id}

    def __hash__(self) -> int:
        return hash((min(self.from_id, self.to_id), max(self.from_id, self.to_id)))


class StateSpace:
    """
    Immutable undirected graph with per-node degree information.

    The degree of a node counts only the edges recorded with that node as
    the ``from`` endpoint, so ``degree`` is asymmetric for the ``to`` side
    of an edge.
    """

    def __init__(self, nodes: Sequence[Node], edges: Sequence[Edge]):
        """
        Build the state space and validate it.

        Args:
            nodes: Nodes with dense ids ``0..len(nodes)-1``
            edges: Edges whose endpoints are valid node ids

        Raises:
            GraphUnavailableError: If there are no nodes, ids are not dense
                or an edge endpoint is out of range
        """
        if not nodes:
            raise GraphUnavailableError("Graph has no nodes")

        ordered = sorted(nodes, key=lambda n: n.id)
        if [n.id for n in ordered] != list(range(len(ordered))):
            raise GraphUnavailableError("Node ids must be dense and start at 0")

        node_count = len(ordered)
        for edge in edges:
            if not (0 <= edge.from_id < node_count and 0 <= edge.to_id < node_count):
                raise GraphUnavailableError(
                    f"Edge ({edge.from_id}, {edge.to_id}) references a node "
                    f"outside 0..{node_count - 1}"
                )

        self._nodes: Tuple[Node, ...] = tuple(ordered)
        self._edges: Tuple[Edge, ...] = tuple(edges)

        adjacency: List[List[Edge]] = [[] for _ in range(node_count)]
        for edge in self._edges:
            adjacency[edge.from_id].append(edge)
        self._adjacent: Tuple[Tuple[Edge, ...], ...] = tuple(tuple(a) for a in adjacency)

        # Vectorised views used by the fitness evaluator
        self.from_ids = np.fromiter((e.from_id for e in self._edges), dtype=np.intp, count=len(self._edges))
        self.to_ids = np.fromiter((e.to_id for e in self._edges), dtype=np.intp, count=len(self._edges))
        self.degrees = np.bincount(self.from_ids, minlength=node_count).astype(np.intp)
        for array in (self.from_ids, self.to_ids, self.degrees):
            array.setflags(write=False)

    @classmethod
    def from_edge_list(
        cls,
        node_count: int,
        edges: Iterable[Tuple[int, int]],
        coordinates: Optional[Sequence[Tuple[float, float]]] = None
    ) -> "StateSpace":
        """Create a state space from a node count and ``(from, to)`` pairs."""
        if coordinates is None:
            nodes = [Node(i) for i in range(node_count)]
        else:
            nodes = [Node(i, float(x), float(y)) for i, (x, y) in enumerate(coordinates)]
        return cls(nodes, [Edge(int(u), int(v)) for u, v in edges])

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    def node_at(self, index: int) -> Node:
        return self._nodes[index]

    def edge_at(self, index: int) -> Edge:
        return self._edges[index]

    def adjacent_edges(self, node: int) -> Tuple[Edge, ...]:
        """Edges recorded with ``node`` as their ``from`` endpoint."""
        return self._adjacent[node]

    def degree(self, node: int) -> int:
        return int(self.degrees[node])

    def validate(self) -> None:
        """Re-check the graph before a run; construction already enforces this."""
        if self.node_count == 0:
            raise GraphUnavailableError("Graph has no nodes")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the graph to a plain dictionary."""
        return {
            "nodes": [{"id": n.id, "x": n.x, "y": n.y} for n in self._nodes],
            "edges": [[e.from_id, e.to_id] for e in self._edges],
        }

    def __repr__(self) -> str:
        return f"StateSpace(nodes={self.node_count}, edges={self.edge_count})"
