#!/usr/bin/env python3

"""
Generate a graph that belongs to a class of worst-case graphs
described by Gabow.

Reference: H. N. Gabow, "An efficient implementation of Edmonds'
           algorithm for maximum matching on graphs", JACM 23
           (1976), pp. 221-234.

Based on the DIMACS generator "hardcard.f" by R. Bruce Mattingly, 1991.

Output to stdout in DIMACS edge format, without edge weights.

Input parameter:    K
Number of vertices: N = 6*K
Number of edges:    M = 8*K*K

Vertices 1 - 4*K form a complete subgraph.
For 1 <= I <= 2*K, vertex (2*I-1) is joined to vertex (4*K+I).
The graph has a perfect matching, but a search that scans the complete
subgraph first keeps finding blossoms before it reaches the pendant
vertices.
"""

from __future__ import annotations

import sys
import argparse


def make_hardcard(k: int) -> list[tuple[int, int]]:
    """Return the edges of the worst-case graph with parameter "k"."""

    edges: list[tuple[int, int]] = []

    for i in range(1, 4*k):
        for j in range(i + 1, 4*k + 1):
            edges.append((i, j))
        if i % 2 == 1:
            edges.append((i, 4*k + (i + 1) // 2))

    return edges


def main() -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = "Generate a worst-case graph for Gabow's algorithm."

    parser.add_argument("k",
                        action="store",
                        type=int,
                        help="size parameter; N = 6*K, M = 8*K*K")
    args = parser.parse_args()

    if args.k < 1:
        print("ERROR: K must be at least 1", file=sys.stderr)
        return 1

    edges = make_hardcard(args.k)

    print(f"p edge {6 * args.k} {len(edges)}")
    for (x, y) in edges:
        print(f"e {x} {y}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
