"""
Algorithm for finding a maximum cardinality matching in general graphs.

This is Gabow's implementation of Edmonds' blossom algorithm.
Blossoms are never contracted explicitly. Instead, every outer vertex
carries a label and a "first" pointer, which together describe the
alternating path from that vertex back to the root of the search.

Reference: H. N. Gabow, "An efficient implementation of Edmonds'
           algorithm for maximum matching on graphs", JACM 23
           (1976), pp. 221-234.
"""

from __future__ import annotations

import collections
import enum
from collections.abc import Iterator
from typing import NamedTuple, Optional


class MatchingError(Exception):
    """Raised when the matching algorithm detects an internal
    inconsistency. This indicates a bug in the algorithm."""


class DisconnectedGraphError(ValueError):
    """Raised when a non-empty graph is not connected.

    Callers that need to handle multiple components must solve each
    component separately and merge the results, for example by calling
    "maximum_cardinality_matching()".
    """

    def __init__(self, num_component: int) -> None:
        super().__init__(
            f"Graph must be connected but has {num_component} components")
        self.num_component = num_component


def maximum_cardinality_matching(
        edges: list[tuple[int, int]]
        ) -> list[tuple[int, int]]:
    """Compute a maximum-cardinality matching in the general undirected
    graph given by "edges".

    The graph is specified as a list of edges, each edge specified as a tuple
    of its two vertices.
    There may be at most one edge between any pair of vertices.
    No vertex may have an edge to itself.
    The graph may be non-connected (i.e. contain multiple components).
    Each component is matched separately.

    Vertices are indexed by positive integers. Vertex index 0 is reserved.
    Vertices that are not incident to any edge are simply left unmatched.

    This function takes time O(n**3), where "n" is the number of vertices.
    This function uses O(n + m) memory, where "m" is the number of edges.

    Parameters:
        edges: List of edges, each edge specified as a tuple "(x, y)"
            where "x" and "y" are vertex indices.

    Returns:
        List of pairs of matched vertex indices.
        This is a subset of the edges in the graph, in the same order
        and orientation as the input.

    Raises:
        ValueError: If the input does not satisfy the constraints.
        TypeError: If the input contains invalid data types.
    """

    _check_input_types(edges)

    # Special case for empty graphs.
    if not edges:
        return []

    graph = Graph.from_edges(edges)

    num_vertex = graph.num_vertex
    components = graph.components()

    # Renumber the vertices of each component as 1 .. k.
    component_of = (num_vertex + 1) * [0]
    local_index = (num_vertex + 1) * [0]
    for (c, component) in enumerate(components):
        for (i, v) in enumerate(component, 1):
            component_of[v] = c
            local_index[v] = i

    component_edges: list[list[tuple[int, int]]] = [
        [] for c in range(len(components))]
    for (x, y) in graph.edges:
        component_edges[component_of[x]].append(
            (local_index[x], local_index[y]))

    # Solve each connected component on its own.
    mate = (num_vertex + 1) * [0]

    for (c, component) in enumerate(components):
        if len(component) < 2:
            continue

        sub_graph = Graph(len(component), component_edges[c])
        sub_matching = gabow_matching(sub_graph)
        for (i, j) in sub_matching.pairs():
            x = component[i - 1]
            y = component[j - 1]
            mate[x] = y
            mate[y] = x

    return [(x, y) for (x, y) in edges if mate[x] == y]


def gabow_matching(graph: Graph) -> Matching:
    """Compute a maximum-cardinality matching in a connected graph.

    The matching is grown one augmenting path at a time. For each vertex
    that is still unmatched, a search phase looks for an augmenting path
    that starts in that vertex. The phases run strictly one after another.

    This function takes time O(n**3).
    Each phase takes time O(m) for scanning edges, plus O(n) for each
    of the at most n calls to "label_blossom()" that label a vertex.

    Parameters:
        graph: Connected graph with vertices 1 .. n.

    Returns:
        The matching, which may leave some vertices unmatched.

    Raises:
        DisconnectedGraphError: If the graph is non-empty and not connected.
        MatchingError: If the algorithm detects an internal inconsistency.
    """

    if graph.num_vertex == 0:
        return Matching()

    num_component = len(graph.components())
    if num_component > 1:
        raise DisconnectedGraphError(num_component)

    # "mate[x]" is the vertex matched to "x", or 0 if "x" is unmatched.
    # This is the only state that survives from one phase to the next.
    mate = (graph.num_vertex + 1) * [0]

    for u in range(1, graph.num_vertex + 1):
        if mate[u] != 0:
            continue

        # Start a new search from the unmatched vertex "u".
        # The phase context holds all labels and pointers for this search
        # and is discarded when the search ends.
        ctx = _PhaseContext(graph, mate, u)
        ctx.run_phase()

    _verify_matching(graph, mate)

    return Matching(mate)


def _check_input_types(edges: list[tuple[int, int]]) -> None:
    """Check that the input consists of valid data types.

    Raises:
        TypeError: If the input contains invalid data types.
        ValueError: If a vertex index is not a positive integer.
    """

    if not isinstance(edges, list):
        raise TypeError('"edges" must be a list')

    for e in edges:
        if (not isinstance(e, tuple)) or (len(e) != 2):
            raise TypeError("Each edge must be specified as a 2-tuple")

        (x, y) = e

        if (not isinstance(x, int)) or (not isinstance(y, int)):
            raise TypeError("Edge endpoints must be integers")

        if (x < 1) or (y < 1):
            raise ValueError("Edge endpoints must be positive integers")


def _check_input_graph(num_vertex: int, edges: list[tuple[int, int]]) -> None:
    """Check that the input is a valid graph, without any multi-edges and
    without any self-edges.

    This function takes time O(m * log(m)).

    Raises:
        ValueError: If the input does not satisfy the constraints.
    """

    for (x, y) in edges:
        if x == y:
            raise ValueError("Self-edges are not supported")
        if max(x, y) > num_vertex:
            raise ValueError(
                f"Edge ({x}, {y}) refers to a vertex above {num_vertex}")

    # Check that the graph does not have multi-edges.
    edge_endpoints = [((x, y) if (x < y) else (y, x)) for (x, y) in edges]
    edge_endpoints.sort()

    for i in range(len(edge_endpoints) - 1):
        if edge_endpoints[i] == edge_endpoints[i+1]:
            raise ValueError(f"Duplicate edge {edge_endpoints[i]}")


class Graph:
    """Representation of an undirected simple graph.

    Vertices are indexed by integers in range 1 .. n.
    Index 0 is the ground vertex; it stands for "no vertex" and is never
    part of the graph.

    These data remain unchanged while the matching algorithm runs.
    """

    def __init__(self, num_vertex: int, edges: list[tuple[int, int]]) -> None:
        """Initialize the graph representation and prepare an adjacency list.

        This function takes time O(n + m * log(m)).

        Parameters:
            num_vertex: Number of vertices in the graph.
            edges: List of edges, each edge specified as a tuple "(x, y)"
                with "1 <= x, y <= num_vertex".

        Raises:
            ValueError: If the input does not satisfy the constraints.
            TypeError: If the input contains invalid data types.
        """

        if not isinstance(num_vertex, int):
            raise TypeError('"num_vertex" must be an integer')
        if num_vertex < 0:
            raise ValueError('"num_vertex" must be non-negative')

        _check_input_types(edges)
        _check_input_graph(num_vertex, edges)

        self.num_vertex: int = num_vertex
        self.edges: list[tuple[int, int]] = edges

        # "adjacent[x]" is the list of neighbours of vertex "x",
        # in order of appearance in the edge list.
        # "adjacent[0]" is always empty.
        self.adjacent: list[list[int]] = [
            [] for v in range(num_vertex + 1)]
        for (x, y) in edges:
            self.adjacent[x].append(y)
            self.adjacent[y].append(x)

    @classmethod
    def from_edges(cls, edges: list[tuple[int, int]]) -> Graph:
        """Create a graph whose highest vertex index is the highest index
        that appears in the edge list."""
        _check_input_types(edges)
        num_vertex = max((max(x, y) for (x, y) in edges), default=0)
        return cls(num_vertex, edges)

    def neighbors(self, v: int) -> list[int]:
        """Return the list of vertices adjacent to vertex "v"."""
        return self.adjacent[v]

    def components(self) -> list[list[int]]:
        """Return the connected components of the graph.

        Each component is a sorted list of vertex indices.
        Components are ordered by their lowest vertex index.

        This function takes time O(n + m).
        """

        component_of = (self.num_vertex + 1) * [0]
        components: list[list[int]] = []

        for start in range(1, self.num_vertex + 1):
            if component_of[start] != 0:
                continue

            component_of[start] = len(components) + 1
            members = [start]
            queue = collections.deque([start])
            while queue:
                x = queue.popleft()
                for y in self.adjacent[x]:
                    if component_of[y] == 0:
                        component_of[y] = component_of[start]
                        members.append(y)
                        queue.append(y)

            members.sort()
            components.append(members)

        return components

    def is_connected(self) -> bool:
        """Return True if the graph consists of at most one component."""
        return len(self.components()) <= 1


class Matching:
    """Result of a matching computation.

    A matching is a set of edges without common vertices.
    It is stored as a list of mates; "mate[x] == 0" means that
    vertex "x" is unmatched.
    """

    def __init__(self, mate: Optional[list[int]] = None) -> None:
        if mate is None:
            mate = [0]
        self._mate: list[int] = list(mate)

    @property
    def num_vertex(self) -> int:
        return len(self._mate) - 1

    def mate(self, v: int) -> Optional[int]:
        """Return the vertex matched to "v", or None if "v" is unmatched."""
        w = self._mate[v]
        return w if w != 0 else None

    def pairs(self) -> list[tuple[int, int]]:
        """Return the matched edges as sorted pairs "(x, y)" with "x < y"."""
        return [(x, y) for (x, y) in enumerate(self._mate) if 0 < x < y]

    def matched_vertices(self) -> Iterator[int]:
        return (x for (x, y) in enumerate(self._mate) if y != 0)

    def is_perfect(self) -> bool:
        """Return True if every vertex of the graph is matched."""
        return 2 * len(self) == self.num_vertex

    def __len__(self) -> int:
        return len(self.pairs())

    def __repr__(self) -> str:
        return f"Matching({self.pairs()!r})"


# Each vertex carries exactly one label during a search phase.
#
# BLANK:     The vertex has not been reached (it is not outer).
# START:     The vertex is the root of the search.
# VERTEX:    The vertex was reached through its mate, via an edge from
#            the outer vertex "vertex".
# EDGE:      The vertex became outer because it lies on a blossom that
#            was found while processing edge "edge".
# JOIN_FLAG: Temporary mark, only used inside one call to
#            "_PhaseContext.label_blossom()" to find the base of a blossom.
class _LabelKind(enum.Enum):
    BLANK = 0
    START = 1
    VERTEX = 2
    EDGE = 3
    JOIN_FLAG = 4


class _Label(NamedTuple):
    """Label of a vertex during a search phase."""
    kind: _LabelKind
    vertex: int = 0
    edge: tuple[int, int] = (0, 0)

    def is_reached(self) -> bool:
        """Return True if the vertex is outer in the current search."""
        return self.kind is not _LabelKind.BLANK

    def is_vertex_label(self) -> bool:
        return self.kind is _LabelKind.VERTEX

    def is_edge_label(self) -> bool:
        return self.kind is _LabelKind.EDGE

    def is_join_flag(self) -> bool:
        return self.kind is _LabelKind.JOIN_FLAG


_BLANK = _Label(_LabelKind.BLANK)
_START = _Label(_LabelKind.START)


class _EdgeVisitationSet:
    """Set of directed edges "(x, y)" that have been scanned from
    vertex "x" in the current search phase."""

    def __init__(self) -> None:
        self._visited: set[tuple[int, int]] = set()

    def add(self, x: int, y: int) -> None:
        self._visited.add((x, y))

    def contains(self, x: int, y: int) -> bool:
        return (x, y) in self._visited

    def __len__(self) -> int:
        return len(self._visited)


class _FrontierQueue:
    """FIFO queue of outer vertices that must be scanned.

    A vertex is added at most once per search phase, even if it is
    offered again after it has been removed from the queue.
    """

    def __init__(self) -> None:
        self._queue: collections.deque[int] = collections.deque()
        self._seen: set[int] = set()

    def push(self, x: int) -> None:
        if x not in self._seen:
            self._seen.add(x)
            self._queue.append(x)

    def pop(self) -> int:
        return self._queue.popleft()

    def __contains__(self, x: int) -> bool:
        return x in self._queue

    def __len__(self) -> int:
        return len(self._queue)


class _PhaseContext:
    """Holds all data used by a single search phase.

    A phase searches for an augmenting path that starts in one unmatched
    root vertex. The phase ends when the matching has been augmented or
    when no more edges can be scanned. All data in the phase context,
    except the shared mate list, is discarded at the end of the phase.
    """

    def __init__(self, graph: Graph, mate: list[int], root: int) -> None:
        """Set up the initial state of a search from vertex "root"."""

        num_vertex = graph.num_vertex

        # Reference to the input graph.
        self.graph = graph

        # Reference to the mate list of the matching algorithm.
        # The phase modifies this list only when it augments the matching.
        self.mate = mate

        # "root" is the unmatched vertex where the search starts.
        self.root = root

        # "label[x]" is the label of vertex "x".
        # Initially all vertices are unlabeled, except the root.
        self.label: list[_Label] = (num_vertex + 1) * [_BLANK]
        self.label[root] = _START

        # For each outer vertex "x", "first[x]" is the first non-outer
        # vertex on the alternating path from "x" to the root,
        # or 0 if there is no such vertex.
        self.first: list[int] = (num_vertex + 1) * [0]

        # Directed edges that have already been scanned in this phase.
        self.visited = _EdgeVisitationSet()

        # Outer vertices waiting to be scanned.
        self.queue = _FrontierQueue()
        self.queue.push(root)

    def outer_vertices(self) -> Iterator[int]:
        return (x for x in range(1, self.graph.num_vertex + 1)
                if self.label[x].is_reached())

    def run_phase(self) -> bool:
        """Scan edges from outer vertices until an augmenting path is found
        or no more edges are available.

        This function takes time O(n**2 + m).

        Returns:
            True if the matching was augmented, False otherwise.
        """

        mate = self.mate
        label = self.label

        while self.queue:
            x = self.queue.pop()

            for y in self.graph.neighbors(x):
                if self.visited.contains(x, y):
                    continue
                self.visited.add(x, y)

                if (mate[y] == 0) and (y != self.root):
                    # Found an augmenting path to the unmatched vertex "y".
                    mate[y] = x
                    _rematch_path(mate, label, x, y)
                    return True

                if label[y].is_reached():
                    # Edge between two outer vertices; may form a blossom.
                    self.label_blossom(x, y)

                else:
                    # Extend the alternating tree through matched vertex "y".
                    v = mate[y]
                    if not label[v].is_reached():
                        label[v] = _Label(_LabelKind.VERTEX, vertex=x)
                        self.first[v] = y
                        self.queue.push(v)

        return False

    def next_nonouter(self, r: int) -> int:
        """Return the next non-outer vertex after "r" on the path to
        the root. Vertex "r" must be a non-outer vertex on such a path."""
        lbl = self.label[self.mate[r]]
        if not lbl.is_vertex_label():
            raise MatchingError(
                f"Expecting vertex label on mate of {r} but got {lbl}")
        return self.first[lbl.vertex]

    def label_blossom(self, x: int, y: int) -> None:
        """Assign edge labels to non-outer vertices on the paths from
        outer vertices "x" and "y" to their common base.

        Edge "(x, y)" connects two outer vertices of the same alternating
        tree. Together with the paths from "x" and "y" back to their
        first common non-outer vertex ("join"), it forms a blossom.
        All non-outer vertices on these paths before "join" become outer.

        This function takes time O(n).
        """

        label = self.label
        first = self.first

        r = first[x]
        s = first[y]

        if r == s:
            # No vertices can be labeled.
            return

        # Find "join" by advancing alternately along both paths,
        # flagging every vertex we pass. The first vertex that is found
        # to be flagged already is the join vertex.
        flag = _Label(_LabelKind.JOIN_FLAG, edge=(x, y))
        flagged = [r, s]
        label[r] = flag
        label[s] = flag

        while True:
            # Switch paths, unless the other path already reached ground.
            if s != 0:
                (r, s) = (s, r)

            r = self.next_nonouter(r)
            if label[r].is_join_flag():
                join = r
                break

            label[r] = flag
            flagged.append(r)

        # Label all non-outer vertices between "x" and "join",
        # and between "y" and "join".
        edge_label = _Label(_LabelKind.EDGE, edge=(x, y))
        for v in (first[x], first[y]):
            while v != join:
                label[v] = edge_label
                first[v] = join
                self.queue.push(v)
                v = self.next_nonouter(v)

        # Vertices that were flagged but not labeled (including "join")
        # remain non-outer.
        for v in flagged:
            if label[v].is_join_flag():
                label[v] = _BLANK

        # Make "join" the first non-outer vertex of every outer vertex
        # that now points to an outer vertex.
        for i in self.outer_vertices():
            if label[first[i]].is_reached():
                first[i] = join


def _rematch_path(
        mate: list[int],
        label: list[_Label],
        v: int,
        w: int
        ) -> None:
    """Rematch the alternating path from outer vertex "v" to the root,
    such that "v" becomes matched to "w".

    This sets "mate[v] = w" but does not set "mate[w] = v";
    the caller is responsible for that.

    Use an explicit stack to avoid deep recursion.
    For an edge label "(a, b)", the path through "a" is rematched
    completely before the path through "b".
    """

    stack: list[tuple[int, int]] = [(v, w)]

    while stack:
        (v, w) = stack.pop()

        t = mate[v]
        mate[v] = w
        if mate[t] != v:
            # The path is completely rematched.
            continue

        lbl = label[v]
        if lbl.is_vertex_label():
            mate[t] = lbl.vertex
            stack.append((lbl.vertex, t))
        elif lbl.is_edge_label():
            (a, b) = lbl.edge
            stack.append((b, a))
            stack.append((a, b))
        else:
            raise MatchingError(
                f"Vertex {v} has an unexpected label {lbl.kind.name}")


def _verify_matching(graph: Graph, mate: list[int]) -> None:
    """Verify that "mate" describes a valid matching in the graph.

    Verification is a redundant step; if the matching algorithm is correct,
    verification will always pass.

    This function takes time O(n + m).

    Raises:
        MatchingError: If the matching is not valid.
    """

    num_vertex = graph.num_vertex

    if len(mate) != num_vertex + 1:
        raise MatchingError("Mate list has wrong length")

    if mate[0] != 0:
        raise MatchingError("Ground vertex must not be matched")

    edge_set = set(graph.edges)

    for x in range(1, num_vertex + 1):
        y = mate[x]
        if y == 0:
            continue
        if not (1 <= y <= num_vertex):
            raise MatchingError(f"Vertex {x} matched to invalid vertex {y}")
        if mate[y] != x:
            raise MatchingError(f"Asymmetric match of vertex {x} and {y}")
        if ((x, y) not in edge_set) and ((y, x) not in edge_set):
            raise MatchingError(f"Non-existent matched edge ({x}, {y})")
