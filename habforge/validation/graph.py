"""Undirected connection graph over habitat modules."""

from typing import Dict, Iterable, List, Set

import networkx as nx

from ..models import Connection


class ConnectionGraph:
    """Adjacency view of a design's connections.

    Every connection is treated as an undirected edge, whatever its
    ``bidirectional`` flag says. Module ids referenced by a connection are
    nodes even if no such module exists.
    """

    def __init__(self, connections: Iterable[Connection], module_ids: Iterable[str] = ()):
        self.G = nx.Graph()
        self.G.add_nodes_from(module_ids)
        for conn in connections:
            self.G.add_edge(conn.from_module_id, conn.to_module_id)

    @property
    def nodes(self) -> List[str]:
        """Module ids in insertion order."""
        return list(self.G.nodes)

    def neighbors(self, module_id: str) -> Set[str]:
        """Modules sharing a direct connection with ``module_id``."""
        if module_id not in self.G:
            return set()
        return set(self.G.neighbors(module_id))

    def connected(self, module_a: str, module_b: str) -> bool:
        """True if the two modules share a direct connection."""
        return self.G.has_edge(module_a, module_b)

    def degree(self, module_id: str) -> int:
        """Number of direct connections; 0 for unknown modules."""
        if module_id not in self.G:
            return 0
        return self.G.degree(module_id)

    def shortest_paths(self, source: str) -> Dict[str, int]:
        """Hop count from ``source`` to every reachable module."""
        if source not in self.G:
            return {source: 0}
        return dict(nx.single_source_shortest_path_length(self.G, source))

    def articulation_points(self) -> Set[str]:
        """Modules whose removal disconnects part of the graph."""
        return set(nx.articulation_points(self.G))
