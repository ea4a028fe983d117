import argparse
import errno
import pathlib
import typing

import rich.console
import rich.markup
import rich.progress

from . import __version__
from .codec import BEDCodec, StartOffset
from .errors import FormatError
from .reader import FeatureReader
from .table import to_dataframe


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bedcodec",
        description="Decode BED files and summarize their features.",
    )
    parser.add_argument("-V", "--version", action="version", version=__version__)
    parser.add_argument(
        "inputs",
        nargs="+",
        type=pathlib.Path,
        help="The BED files to read, optionally compressed.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=pathlib.Path,
        help="Write the decoded features to a TSV table.",
    )
    parser.add_argument(
        "--one-based",
        action="store_true",
        help="Read start columns as 1-based instead of 0-based.",
    )
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip malformed records instead of stopping at the first one.",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Disable console output."
    )
    return parser


def main(
    argv: typing.Optional[typing.List[str]] = None,
    console: typing.Optional[rich.console.Console] = None,
) -> int:
    args = build_parser().parse_args(argv)
    if console is None:
        console = rich.console.Console(stderr=True, quiet=args.quiet)

    start_offset = StartOffset.ZERO if args.one_based else StartOffset.ONE
    codec = BEDCodec(start_offset=start_offset)

    features = []
    with rich.progress.Progress(console=console, transient=True) as progress:
        for path in args.inputs:
            if not codec.can_decode(path):
                console.print(
                    f"[bold yellow]{'Warning':>12}[/] {str(path)!r} does not "
                    "have a BED file extension"
                )
            task = progress.add_task(f"[bold blue]{'Reading':>9}[/]")
            try:
                handle = progress.open(path, "rb", task_id=task)
            except FileNotFoundError:
                console.print(f"[bold red]{'Failed':>12}[/] to find {str(path)!r}")
                return errno.ENOENT
            try:
                with handle, FeatureReader(
                    handle, codec, skip_invalid=args.skip_invalid, console=console
                ) as reader:
                    n = 0
                    for feature in reader:
                        n += 1
                        # only keep features when a table is requested
                        if args.output is not None:
                            features.append(feature)
                    skipped = reader.skipped
            except FormatError as err:
                console.print(
                    f"[bold red]{'Failed':>12}[/] to decode {str(path)!r}: "
                    f"{rich.markup.escape(str(err))}"
                )
                return 1
            finally:
                progress.remove_task(task)
            console.print(
                f"[bold green]{'Loaded':>12}[/] {n} features "
                f"from {str(path)!r}"
                + (f" ({skipped} invalid records skipped)" if skipped else "")
            )

    if args.output is not None:
        table = to_dataframe(features)
        table.to_csv(args.output, sep="\t", index=False)
        console.print(
            f"[bold green]{'Saved':>12}[/] {len(table)} features to {str(args.output)!r}"
        )

    return 0
