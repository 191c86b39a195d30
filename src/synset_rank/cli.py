"""
Command-line interface for building and querying graph snapshots.
"""
from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Optional

from . import builder
from .config import load_config
from .dictionary import TextDictionary
from .exceptions import SynsetRankError
from .graph import KnowledgeGraph
from .models import VertexKind
from .ranking import pagerank_ppv, ppv_from_names, top_ranked
from .serialization import load_binfile, write_to_binfile
from .traversal import dijkstra_distances, shortest_path


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the synset-rank CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    args.argv = list(sys.argv[1:] if argv is None else argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (SynsetRankError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="synset-rank",
        description="Build synset graphs and rank them with personalized PageRank",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug messages",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # compile command
    compile_parser = subparsers.add_parser(
        "compile",
        help="Build a graph snapshot from relation files",
    )
    compile_parser.add_argument(
        "rel_files",
        type=Path,
        nargs="+",
        help="Relation text files",
    )
    compile_parser.add_argument(
        "-o", "--output",
        type=Path,
        required=True,
        help="Snapshot file to write",
    )
    compile_parser.add_argument(
        "-s", "--source",
        action="append",
        default=[],
        help="Accepted relation source tag (repeatable)",
    )
    compile_parser.add_argument(
        "--dict",
        type=Path,
        help="Dictionary file whose words are linked to their synsets",
    )
    compile_parser.add_argument(
        "--dict-weight",
        action="store_true",
        help="Weight word links by 1/sense rank",
    )
    compile_parser.set_defaults(func=cmd_compile)

    # info command
    info_parser = subparsers.add_parser("info", help="Summarize a snapshot")
    info_parser.add_argument("snapshot", type=Path)
    info_parser.set_defaults(func=cmd_info)

    # dump command
    dump_parser = subparsers.add_parser("dump", help="Print every vertex and edge")
    dump_parser.add_argument("snapshot", type=Path)
    dump_parser.set_defaults(func=cmd_dump)

    # rank command
    rank_parser = subparsers.add_parser(
        "rank",
        help="Rank vertices by PageRank personalized on context names",
    )
    rank_parser.add_argument("snapshot", type=Path)
    rank_parser.add_argument(
        "-c", "--context",
        nargs="+",
        required=True,
        help="Names of the vertices to teleport to",
    )
    rank_parser.add_argument(
        "--config",
        type=Path,
        help="YAML file with ranking parameters",
    )
    rank_parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of results to show (default: 10)",
    )
    rank_parser.add_argument(
        "--synsets-only",
        action="store_true",
        help="Only show synset vertices",
    )
    rank_parser.add_argument(
        "--no-weight",
        action="store_true",
        help="Ignore edge weights",
    )
    rank_parser.set_defaults(func=cmd_rank)

    # path command
    path_parser = subparsers.add_parser(
        "path",
        help="Print the shortest weighted path between two vertices",
    )
    path_parser.add_argument("snapshot", type=Path)
    path_parser.add_argument("source")
    path_parser.add_argument("target")
    path_parser.set_defaults(func=cmd_path)

    return parser


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle the compile command."""
    graph = KnowledgeGraph()
    for tag in args.source:
        builder.add_rel_source(graph, tag)
    for rel_file in args.rel_files:
        stats = builder.add_from_txt(graph, rel_file)
        print(
            f"{rel_file}: {stats.added} relations added, "
            f"{stats.filtered} filtered, {stats.malformed} malformed"
        )
    if args.dict is not None:
        dictionary = TextDictionary.from_file(args.dict)
        words = builder.add_dictionary(graph, dictionary, args.dict_weight)
        print(f"{args.dict}: {words} words linked")

    graph.add_comment(shlex.join(["synset-rank", *args.argv]))
    write_to_binfile(graph, args.output)
    print(f"Wrote {graph.size()} vertices and {graph.num_edges()} edges to {args.output}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the info command."""
    load_binfile(args.snapshot).display_info(sys.stdout)
    return 0


def cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump command."""
    load_binfile(args.snapshot).dump_graph(sys.stdout)
    return 0


def cmd_rank(args: argparse.Namespace) -> int:
    """Handle the rank command."""
    config = load_config(args.config)
    graph = load_binfile(args.snapshot)
    ppv = ppv_from_names(graph, args.context)
    use_weight = False if args.no_weight else config.use_weight
    ranks = pagerank_ppv(graph, ppv, use_weight=use_weight, config=config)

    kind = VertexKind.SYNSET if args.synsets_only else None
    for name, score in top_ranked(graph, ranks, args.top, kind=kind):
        print(f"{score:.6f}\t{name}")
    return 0


def cmd_path(args: argparse.Namespace) -> int:
    """Handle the path command."""
    graph = load_binfile(args.snapshot)
    source, found = graph.get_vertex_by_name(args.source)
    if not found:
        print(f"Unknown vertex: {args.source}", file=sys.stderr)
        return 1
    target, found = graph.get_vertex_by_name(args.target)
    if not found:
        print(f"Unknown vertex: {args.target}", file=sys.stderr)
        return 1

    dist, parents = dijkstra_distances(graph, source)
    path = shortest_path(parents, source, target)
    if not path:
        print(f"No path from {args.source} to {args.target}")
        return 1
    print(" -> ".join(graph.get_vertex_name(u) for u in path))
    print(f"Total weight: {dist[target]:g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
