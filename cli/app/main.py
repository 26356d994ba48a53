from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from cli.app.config import settings
from common.embed.errors import EmbedEmailError
from worker.jobs.embed_job import resolve_inputs, run_batch

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="embed-email",
        description="Embed remote images of .eml files as inline attachments.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose printing")
    parser.add_argument(
        "files",
        nargs="*",
        help=f"input files; none or '*{settings.input_suffix}' processes every "
        f"{settings.input_suffix} below the current directory",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        paths = resolve_inputs(args.files)
        run_batch(paths)
    except EmbedEmailError as exc:
        print(exc, file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
