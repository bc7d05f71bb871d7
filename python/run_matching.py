#!/usr/bin/env python3

"""
Calculate maximum cardinality matching of graphs in DIMACS format.
"""

from __future__ import annotations

import sys
import argparse
import os
import os.path
from typing import Optional, TextIO

from mcmatching import maximum_cardinality_matching


def read_dimacs_graph(f: TextIO) -> list[tuple[int, int]]:
    """Read a graph in DIMACS edge list format.

    Edge lines may carry a weight; the weight is ignored.
    """

    edges: list[tuple[int, int]] = []

    for line in f:
        s = line.strip()
        words = s.split()

        if not words:
            # Skip empty line.
            continue

        if words[0].startswith("c"):
            # Skip comment line.
            pass

        elif words[0] == "p":
            # Handle "problem" line.
            if len(words) != 4:
                raise ValueError(
                    f"Expecting DIMACS edge format but got {s!r}")
            if words[1] != "edge":
                raise ValueError(
                    f"Expecting DIMACS edge format but got {words[1]!r}")

        elif words[0] == "e":
            # Handle "edge" line.
            if len(words) not in (3, 4):
                raise ValueError(f"Expecting edge but got {s!r}")
            x = int(words[1])
            y = int(words[2])
            if (x < 1) or (y < 1):
                raise ValueError(f"Invalid vertex index {s!r}")
            edges.append((x, y))

        else:
            raise ValueError(f"Unknown line type {words[0]!r}")

    return edges


def read_dimacs_graph_file(filename: str) -> list[tuple[int, int]]:
    """Read a graph from file or stdin."""
    if filename:
        with open(filename, "r", encoding="ascii") as f:
            try:
                return read_dimacs_graph(f)
            except ValueError as exc:
                raise ValueError(f"{exc} in {filename!r}") from None
    else:
        try:
            return read_dimacs_graph(sys.stdin)
        except ValueError as exc:
            raise ValueError(f"{exc} in (stdin)") from None


def read_dimacs_matching(f: TextIO) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching solution in DIMACS format.

    Returns:
        Tuple (cardinality, pairs).
    """

    have_size = False
    size = 0
    pairs: list[tuple[int, int]] = []

    for line in f:
        s = line.strip()
        words = s.split()

        if not words:
            # Skip empty line.
            continue

        if words[0].startswith("c"):
            # Skip comment line.
            pass

        elif words[0] == "s":
            # Handle "solution" line.
            if len(words) != 2:
                raise ValueError(
                    f"Expecting solution line but got {s!r}")
            if have_size:
                raise ValueError("Duplicate solution line")
            have_size = True
            size = int(words[1])

        elif words[0] == "m":
            # Handle "matching" line.
            if len(words) != 3:
                raise ValueError(
                    f"Expecting matched edge but got {s!r}")
            x = int(words[1])
            y = int(words[2])
            if (x < 1) or (y < 1):
                raise ValueError(f"Invalid vertex index {s!r}")
            pairs.append((x, y))

        else:
            raise ValueError(f"Unknown line type {words[0]!r}")

    if not have_size:
        raise ValueError("Missing solution line")

    return (size, pairs)


def read_dimacs_matching_file(
        filename: str
        ) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching from file."""
    with open(filename, "r", encoding="ascii") as f:
        try:
            return read_dimacs_matching(f)
        except ValueError as exc:
            raise ValueError(f"{exc} in {filename!r}") from None


def write_dimacs_matching(f: TextIO, pairs: list[tuple[int, int]]) -> None:
    """Write a matching solution in DIMACS format."""

    print("s", len(pairs), file=f)

    for (x, y) in pairs:
        print("m", x, y, file=f)


def write_dimacs_matching_file(
        filename: str,
        pairs: list[tuple[int, int]]
        ) -> None:
    """Write a matching to file or stdout."""
    if filename:
        with open(filename, "x", encoding="ascii") as f:
            write_dimacs_matching(f, pairs)
    else:
        write_dimacs_matching(sys.stdout, pairs)


def check_matching(
        edges: list[tuple[int, int]],
        pairs: list[tuple[int, int]]
        ) -> int:
    """Verify that the matching is valid and return its cardinality.

    Raises:
        ValueError: If the matching uses a vertex twice or contains
            an edge that is not in the graph.
    """

    edge_set = set((min(x, y), max(x, y)) for (x, y) in edges)
    nodes_used: set[int] = set()

    for pair in pairs:
        x = min(pair)
        y = max(pair)
        if (x in nodes_used) or (y in nodes_used):
            raise ValueError(f"Matching uses vertex of {pair} twice")
        if (x, y) not in edge_set:
            raise ValueError(f"Matching contains non-existing edge {pair}")
        nodes_used.add(x)
        nodes_used.add(y)

    return len(pairs)


def generate_matching(input_filename: str, output_filename: str) -> None:
    """Calculate matching of one graph instance."""

    edges = read_dimacs_graph_file(input_filename)
    pairs = maximum_cardinality_matching(edges)
    check_matching(edges, pairs)
    write_dimacs_matching_file(output_filename, pairs)


def run_generate(filenames: list[str], outdir: Optional[str]) -> int:
    """Calculate matching(s) and write output to disk or stdout."""

    if len(filenames) == 0:
        # Read from stdin; write to stdout.
        generate_matching("", "")

    elif not outdir:
        # Read from file, write to stdout.
        assert len(filenames) == 1
        generate_matching(filenames[0], "")

    else:
        # Read from file, write to file.
        for filename in filenames:
            output_filename = os.path.join(
                outdir,
                os.path.splitext(os.path.basename(filename))[0] + ".out")
            print(f"Processing {filename!r} -> {output_filename!r} ...",
                  end=" ")
            sys.stdout.flush()

            generate_matching(filename, output_filename)

            print(" OK")
            sys.stdout.flush()

    return 0


def verify_matching(filename: str) -> bool:
    """Verify matching of one graph instance."""

    print("Verifying", repr(filename), "...", end=" ")
    sys.stdout.flush()

    matching_filename = os.path.splitext(filename)[0] + ".out"

    edges = read_dimacs_graph_file(filename)
    (gold_size, gold_pairs) = read_dimacs_matching_file(matching_filename)

    if check_matching(edges, gold_pairs) != gold_size:
        print("FAILED",
              f"(reference file lists {len(gold_pairs)} pairs"
              f" but claims {gold_size})")
        return False

    pairs = maximum_cardinality_matching(edges)
    size = check_matching(edges, pairs)

    if size != gold_size:
        print("FAILED", f"(got {size} pairs, expected {gold_size})")
        return False

    print("OK")
    return True


def run_verify(filenames: list[str]) -> int:
    """Verify matching(s)."""

    num_passed = 0
    failed_tests: list[str] = []

    for filename in filenames:
        if verify_matching(filename):
            num_passed += 1
        else:
            failed_tests.append(filename)
        sys.stdout.flush()

    print("done.")
    print(num_passed, "tests passed")
    if failed_tests:
        print(len(failed_tests), "tests failed:")
        for filename in failed_tests:
            print("   ", filename, "FAILED")
    else:
        print("All tests passed")
    sys.stdout.flush()

    return 1 if failed_tests else 0


def main() -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = (
        "Calculate maximum cardinality matching of graphs in DIMACS format.")

    parser.add_argument("--verify",
                        action="store_true",
                        help="verify existing output file(s)")
    parser.add_argument("--outdir",
                        action="store",
                        type=str,
                        help="directory to write output")
    parser.add_argument("input",
                        nargs="*",
                        help="input file(s); leave empty to read from stdin")

    args = parser.parse_args()

    if (not args.input) and os.isatty(sys.stdin.fileno()):
        print("ERROR: Expecting input from stdin but stdin is a terminal",
              file=sys.stderr)
        print(file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if (not args.input) and args.verify:
        print("ERROR: Can not verify when reading from stdin",
              file=sys.stderr)
        return 1

    if len(args.input) > 1 and (not args.verify) and (not args.outdir):
        print("ERROR: Need --outdir or --verify to process multiple inputs",
              file=sys.stderr)
        return 1

    try:
        if args.verify:
            return run_verify(args.input)
        else:
            return run_generate(args.input, args.outdir)
    except (OSError, ValueError) as exc:
        print("ERROR:", exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
