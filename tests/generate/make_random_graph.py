#!/usr/bin/env python3

"""
Generate a random connected graph in DIMACS format.
"""

from __future__ import annotations

import sys
import argparse
import random
from typing import TextIO


def write_dimacs_graph(
        f: TextIO,
        num_vertex: int,
        edges: list[tuple[int, int]]
        ) -> None:
    """Write an unweighted graph in DIMACS edge list format."""

    print(f"p edge {num_vertex} {len(edges)}", file=f)

    for (x, y) in edges:
        print(f"e {x} {y}", file=f)


def make_random_graph(
        n: int,
        m: int,
        rng: random.Random
        ) -> list[tuple[int, int]]:
    """Generate a random connected graph with "n" vertices and "m" edges.

    The graph starts as a random spanning tree; random edges are added
    until there are "m" edges.
    """

    edge_set: set[tuple[int, int]] = set()

    for y in range(2, n + 1):
        x = rng.randint(1, y - 1)
        edge_set.add((x, y))

    if 3 * m < n * (n - 1) // 2:
        # Simply add random edges until we have enough.
        while len(edge_set) < m:
            x = rng.randint(1, n - 1)
            y = rng.randint(x + 1, n)
            edge_set.add((x, y))

    else:
        # We need a very dense graph.
        # Generate all edge candidates and choose a random subset.
        edge_candidates = [(x, y)
                           for x in range(1, n)
                           for y in range(x + 1, n + 1)
                           if (x, y) not in edge_set]
        rng.shuffle(edge_candidates)
        edge_set.update(edge_candidates[:m-len(edge_set)])

    # Renumber vertices so the spanning tree is not visible in the indices.
    perm = list(range(1, n + 1))
    rng.shuffle(perm)

    return sorted((min(perm[x-1], perm[y-1]), max(perm[x-1], perm[y-1]))
                  for (x, y) in edge_set)


def main() -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = "Generate a random connected graph in DIMACS format."

    parser.add_argument("--seed",
                        action="store",
                        type=int,
                        help="random seed")
    parser.add_argument("n",
                        action="store",
                        type=int,
                        help="number of vertices")
    parser.add_argument("m",
                        action="store",
                        type=int,
                        help="number of edges")

    args = parser.parse_args()

    if args.n < 2:
        print("ERROR: Number of vertices must be >= 2", file=sys.stderr)
        return 1

    if args.m < args.n - 1:
        print("ERROR: Need at least N-1 edges for a connected graph",
              file=sys.stderr)
        return 1

    if args.m > args.n * (args.n - 1) // 2:
        print("ERROR: Too many edges", file=sys.stderr)
        return 1

    rng = random.Random(args.seed)

    edges = make_random_graph(args.n, args.m, rng)
    write_dimacs_graph(sys.stdout, args.n, edges)

    return 0


if __name__ == "__main__":
    sys.exit(main())
