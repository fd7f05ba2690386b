"""Command line tool for packaging a helm chart as a service bundle."""

import argparse
import asyncio
import logging
import pathlib
import sys
import traceback
from typing import Any

from helm2bundle.archive import extract_chart
from helm2bundle.exceptions import Helm2BundleException
from helm2bundle.writer import write_bundle

_LOGGER = logging.getLogger(__name__)


class BundleAction:
    """Packages a helm chart archive as a service bundle."""

    async def run(
        self,
        chartfile: str,
        output_dir: pathlib.Path,
        force: bool,
        **kwargs: Any,
    ) -> list[pathlib.Path]:
        """Async Action implementation."""
        result = await asyncio.to_thread(extract_chart, chartfile)
        paths = await write_bundle(result, output_dir, force=force)
        for path in paths:
            _LOGGER.info("Wrote %s", path)
        return paths


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="helm2bundle",
        description="Packages a helm chart as a Service Bundle.",
    )
    parser.add_argument(
        "chartfile",
        type=str,
        help="Packaged helm chart archive (.tgz)",
    )
    parser.add_argument(
        "-f",
        "--force",
        default=False,
        action="store_true",
        help="force overwrite of existing files",
    )
    parser.add_argument(
        "--output-dir",
        type=pathlib.Path,
        default=pathlib.Path("."),
        help="Directory where apb.yml and Dockerfile are written",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """helm2bundle command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = BundleAction()
    try:
        asyncio.run(action.run(**vars(args)))
    except Helm2BundleException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("helm2bundle error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
