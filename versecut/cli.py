"""versecut CLI - Classify lyric sheets from the command line.

Usage:
    versecut classify lyrics.txt             Table of verdicts plus summary
    versecut classify lyrics.txt --strip     Print the lyrics without headers
    versecut classify - --json < lyrics.txt  JSON verdicts read from stdin
    versecut centroids centroids.npy         Precompute and save centroids
    versecut version                         Show version information

Global flags (before the command):
    -v/--verbose   debug logging
    --log-json     structured JSON log lines
    --config PATH  read configuration from PATH
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console
from rich.table import Table
from rich.text import Text

from versecut.classifiers import (
    ClassifierSession,
    build_centroids,
    load_centroids,
    save_centroids,
    strip_headers,
    summarize,
)
from versecut.config import VersecutConfig, get_config, load_config
from versecut.contracts import Classification, ClassificationStats, LineType
from versecut.embedding_adapter import (
    EmbeddingProvider,
    SentenceTransformerBackend,
    reset_default_backend,
)
from versecut.errors import ConfigurationError, ErrorCode, VersecutError
from versecut.observability import configure_logging

console = Console()
logger = logging.getLogger(__name__)

TYPE_STYLES = {
    LineType.HEADER: "bold magenta",
    LineType.LYRIC: "green",
    LineType.EMPTY: "dim",
    LineType.UNCERTAIN: "yellow",
}


def _format_error(error: VersecutError) -> None:
    """Print a VersecutError with its details."""
    console.print(f"[red]Error: {error.message}[/red]")
    for key, value in error.details.items():
        console.print(f"[dim]  {key}: {value}[/dim]")
    if error.cause is not None:
        console.print(f"[dim]  cause: {type(error.cause).__name__}: {error.cause}[/dim]")


def _resolve_config(args: argparse.Namespace) -> VersecutConfig:
    if args.config:
        path = Path(args.config)
        if not path.is_file():
            raise ConfigurationError(
                f"Config file not found: {path}",
                config_path=str(path),
                code=ErrorCode.CFG_MISSING,
            )
        config = load_config(path)
    else:
        config = get_config()
    workers = getattr(args, "workers", None)
    if workers is not None:
        config = config.model_copy(deep=True)
        config.classifier.max_workers = workers
    return config


def _make_provider(args: argparse.Namespace, config: VersecutConfig) -> EmbeddingProvider:
    # An explicit config file may name a different model than the shared backend
    if args.config:
        return EmbeddingProvider(SentenceTransformerBackend(config.embedding))
    return EmbeddingProvider()


def _read_lines(source: str) -> list[str]:
    if source == "-":
        return sys.stdin.read().splitlines()
    return Path(source).read_text(encoding="utf-8").splitlines()


def _render_table(results: list[Classification]) -> Table:
    table = Table(title="Line classification")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type")
    table.add_column("Conf", justify="right")
    table.add_column("Method")
    table.add_column("Re", justify="center")
    table.add_column("Text", overflow="fold")

    for result in results:
        style = TYPE_STYLES[result.type]
        table.add_row(
            str(result.line.index + 1),
            Text(result.type.value, style=style),
            f"{result.confidence:.2f}",
            result.method.value,
            "*" if result.reprocessed else "",
            Text(result.text),
        )
    return table


def _print_stats(stats: ClassificationStats) -> None:
    console.print(
        f"\n[bold]{stats.total}[/bold] lines: "
        f"[magenta]{stats.headers} headers[/magenta], "
        f"[green]{stats.lyrics} lyrics[/green], "
        f"[yellow]{stats.uncertain} uncertain[/yellow], "
        f"{stats.total - stats.non_empty} empty"
    )
    console.print(
        f"[dim]avg confidence {stats.avg_confidence:.2f} | "
        f"decided by rules {stats.rule_share:.0%} | "
        f"reprocessed {stats.reprocessed}[/dim]"
    )


def cmd_classify(args: argparse.Namespace) -> int:
    """Classify a lyric sheet.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code.
    """
    if args.input != "-" and not Path(args.input).is_file():
        console.print(f"[red]Error: file not found: {args.input}[/red]")
        return 1

    try:
        config = _resolve_config(args)
        centroids = load_centroids(Path(args.centroids)) if args.centroids else None
        session = ClassifierSession(
            config=config, provider=_make_provider(args, config), centroids=centroids
        )
        results = session.classify_lines(_read_lines(args.input))
    except VersecutError as e:
        _format_error(e)
        return 1
    except UnicodeDecodeError as e:
        console.print(f"[red]Error: not valid UTF-8 text: {args.input} (byte {e.start})[/red]")
        return 1
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if args.strip:
        for text in strip_headers(results):
            print(text)
        return 0

    stats = summarize(results)
    if args.json:
        payload = {
            "results": [r.to_dict() for r in results],
            "stats": stats.to_dict(),
        }
        print(json.dumps(payload, indent=2))
        return 0

    console.print(_render_table(results))
    _print_stats(stats)
    return 0


def cmd_centroids(args: argparse.Namespace) -> int:
    """Build centroids from the default reference corpus and save them.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code.
    """
    output = Path(args.output)
    if output.exists() and not args.force:
        console.print(f"[yellow]{output} exists. Use --force to overwrite.[/yellow]")
        return 1

    try:
        config = _resolve_config(args)
        centroids = build_centroids(_make_provider(args, config))
        save_centroids(centroids, output)
    except VersecutError as e:
        _format_error(e)
        return 1

    console.print(
        f"[green]Saved {centroids.dim}-dim centroids to {output}[/green] "
        f"[dim](model: {config.embedding.model_name})[/dim]"
    )
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Display version information.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code.
    """
    from versecut import __version__

    console.print(f"versecut v{__version__}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="versecut",
        description="Tell song-section headers apart from lyric lines.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  versecut classify song.txt              Show every verdict
  versecut classify song.txt --strip      Lyrics only, headers removed
  cat song.txt | versecut classify - --json
  versecut centroids ~/.versecut/centroids.npy
        """,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="emit structured JSON log lines",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="configuration file (default: $VERSECUT_CONFIG or ~/.versecut/config.json)",
    )

    subparsers = parser.add_subparsers(dest="command", title="commands")

    classify_parser = subparsers.add_parser("classify", help="classify the lines of a lyric sheet")
    classify_parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="lyrics file, or - for stdin (default)",
    )
    output_group = classify_parser.add_mutually_exclusive_group()
    output_group.add_argument("--json", action="store_true", help="print JSON")
    output_group.add_argument(
        "--strip", action="store_true", help="print the lyrics with headers removed"
    )
    classify_parser.add_argument(
        "--centroids",
        metavar="FILE",
        help="precomputed centroids from 'versecut centroids'",
    )
    classify_parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="threads for the first pass (overrides config)",
    )
    classify_parser.set_defaults(func=cmd_classify)

    centroids_parser = subparsers.add_parser(
        "centroids", help="build and save centroids from the reference corpus"
    )
    centroids_parser.add_argument("output", help="output .npy file")
    centroids_parser.add_argument("--force", action="store_true", help="overwrite existing file")
    centroids_parser.set_defaults(func=cmd_centroids)

    version_parser = subparsers.add_parser("version", help="show version information")
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. Uses sys.argv if None.

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, structured=args.log_json)

    if args.command is None:
        parser.print_help()
        return 0

    if getattr(args, "workers", None) is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    result: int = args.func(args)
    return result


def run() -> NoReturn:
    """Entry point that handles cleanup and exit."""
    try:
        exit_code = main()
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted.[/dim]")
        exit_code = 130
    except VersecutError as e:
        _format_error(e)
        logger.exception("versecut error")
        exit_code = 1
    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        logger.exception("Unexpected error")
        exit_code = 1
    finally:
        reset_default_backend()

    sys.exit(exit_code)


if __name__ == "__main__":
    run()
