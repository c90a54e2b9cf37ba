"""
Map loading and discovery.

A map is a directory holding two whitespace-separated text files:
``nodes`` (``id x y [ignored...]`` per line) and ``edges`` (``from to`` per
line). The loader turns one such directory into a ``StateSpace``; the
browser lists the map directories available under a root.
"""

from pathlib import Path
from typing import List, Union

import logfire

from src.core.exceptions import MapLoadError
from src.graph.state_space import Edge, Node, StateSpace


NODES_FILE = "nodes"
EDGES_FILE = "edges"


def _read_lines(path: Path) -> List[List[str]]:
    try:
        with open(path, "r") as f:
            return [line.split() for line in f if line.strip()]
    except OSError as e:
        raise MapLoadError(f"Cannot read {path}: {e}") from e


def load_map(directory: Union[str, Path]) -> StateSpace:
    """
    Load a map directory into a state space.

    Args:
        directory: Path to a directory containing ``nodes`` and ``edges``

    Returns:
        The parsed, validated state space

    Raises:
        MapLoadError: If a file is missing or a line cannot be parsed
        GraphUnavailableError: If the parsed graph is empty or malformed
    """
    directory = Path(directory)

    with logfire.span("Load Map", map=directory.name):
        nodes = []
        for lineno, parts in enumerate(_read_lines(directory / NODES_FILE), start=1):
            try:
                nodes.append(Node(int(parts[0]), float(parts[1]), float(parts[2])))
            except (IndexError, ValueError) as e:
                raise MapLoadError(f"{directory / NODES_FILE}:{lineno}: malformed node line") from e

        edges = []
        for lineno, parts in enumerate(_read_lines(directory / EDGES_FILE), start=1):
            try:
                edges.append(Edge(int(parts[0]), int(parts[1])))
            except (IndexError, ValueError) as e:
                raise MapLoadError(f"{directory / EDGES_FILE}:{lineno}: malformed edge line") from e

        graph = StateSpace(nodes, edges)
        logfire.info(
            "Loaded map {map}",
            map=directory.name,
            node_count=graph.node_count,
            edge_count=graph.edge_count
        )
        return graph


def discover_maps(root: Union[str, Path]) -> List[str]:
    """List the names of map directories under ``root``, sorted."""
    root = Path(root)
    if not root.is_dir():
        return []

    return sorted(
        child.name
        for child in root.iterdir()
        if child.is_dir() and (child / NODES_FILE).is_file() and (child / EDGES_FILE).is_file()
    )
