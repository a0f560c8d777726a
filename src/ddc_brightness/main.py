"""ddc-brightness-ctl entry point: CLI args, display discovery, exit status."""

import argparse
import logging
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError, version

from rich.console import Console

from ddc_brightness.brightness import BrightnessChange, InvalidChangeError
from ddc_brightness.config import get_config
from ddc_brightness.controller import BatchController
from ddc_brightness.transport.base import DisplayTransport
from ddc_brightness.utils.logger import setup_logging

PROG = "ddc-brightness-ctl"

logger = logging.getLogger(__name__)


def _version() -> str:
    try:
        return version(PROG)
    except PackageNotFoundError:
        return "unknown"


def _integer(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer") from None


def _change(
    factory: Callable[[int], BrightnessChange], text: str, sign: int = 1,
) -> BrightnessChange:
    try:
        return factory(sign * _integer(text))
    except InvalidChangeError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _increase(text: str) -> BrightnessChange:
    return _change(BrightnessChange.relative, text)


def _decrease(text: str) -> BrightnessChange:
    return _change(BrightnessChange.relative, text, sign=-1)


def _set(text: str) -> BrightnessChange:
    return _change(BrightnessChange.absolute, text)


def _display_index(text: str) -> int:
    index = _integer(text)
    if index < 0:
        raise argparse.ArgumentTypeError(f"display index must not be negative: {index}")
    return index


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Read and adjust monitor brightness over DDC/CI.",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s v{_version()}",
        help="get the program version",
    )
    parser.add_argument(
        "-d", "--display",
        type=_display_index,
        metavar="NUM",
        help="optionally specify which display to change; "
             "default operates on all displays",
    )
    parser.add_argument(
        "-l", "--list",
        action="store_true",
        help="list all detected displays and metadata",
    )

    # All actions share one destination: the last one given wins
    parser.set_defaults(change=BrightnessChange.query())
    parser.add_argument(
        "--get",
        dest="change",
        action="store_const",
        const=BrightnessChange.query(),
        help="get the current brightness",
    )
    parser.add_argument(
        "--set", dest="change", type=_set, metavar="NUM",
        help="set brightness to NUM percent",
    )
    parser.add_argument(
        "--inc", dest="change", type=_increase, metavar="NUM",
        help="increase brightness by NUM percent",
    )
    parser.add_argument(
        "--dec", dest="change", type=_decrease, metavar="NUM",
        help="decrease brightness by NUM percent",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )
    return parser


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return _build_parser().parse_args(argv)


def _create_transport() -> DisplayTransport:
    from ddc_brightness.transport.monitorcontrol_ddc import MonitorControlTransport

    return MonitorControlTransport()


def main(argv: list[str] | None = None) -> int:
    """Synchronous entry point. Returns the process exit status."""
    args = _parse_args(argv)

    config = get_config()
    setup_logging(
        verbose=args.verbose,
        log_level=config.log_level,
        log_dir=config.log_dir if config.log_to_file else None,
    )

    console = Console(no_color=config.no_color, highlight=False)
    err_console = Console(stderr=True, no_color=config.no_color, highlight=False)

    controller = BatchController(
        _create_transport(),
        console=console,
        err_console=err_console,
        strict_sweep=config.strict_sweep,
    )

    console.print("Querying display info... (~1-2 seconds)")

    if args.list:
        return controller.list_displays().exit_code

    display = args.display if args.display is not None else config.default_display
    logger.info(
        "Requested %s on %s",
        args.change, "all displays" if display is None else f"display {display}",
    )
    return controller.run(args.change, display).exit_code


if __name__ == "__main__":
    raise SystemExit(main())
