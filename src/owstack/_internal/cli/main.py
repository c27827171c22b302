import argparse

import argcomplete
from rich.markup import escape
from rich_argparse import RichHelpFormatter

from owstack._internal.cli.commands.backup import BackupCommand, RestoreCommand
from owstack._internal.cli.commands.configure import ConfigureCommand
from owstack._internal.cli.commands.images import ImagesCommand
from owstack._internal.cli.utils.common import _colors, console
from owstack._internal.core.errors import OwstackError
from owstack._internal.utils.logging import get_logger
from owstack.version import __version__ as version

logger = get_logger(__name__)


def main():
    RichHelpFormatter.usage_markup = True
    RichHelpFormatter.styles["code"] = _colors["code"]
    RichHelpFormatter.styles["argparse.args"] = _colors["code"]
    RichHelpFormatter.styles["argparse.groups"] = "bold grey74"
    RichHelpFormatter.styles["argparse.text"] = "grey74"

    parser = argparse.ArgumentParser(
        description=(
            "Not sure where to start?"
            " Generate the stack configuration via [code]owstack configure[/]\n"
        ),
        formatter_class=RichHelpFormatter,
        epilog="Run [code]owstack COMMAND --help[/] for more information on a particular command.",
        add_help=True,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{version}",
        help="Show owstack version",
    )
    parser.set_defaults(func=lambda _: parser.print_help())

    subparsers = parser.add_subparsers(metavar="COMMAND")
    BackupCommand.register(subparsers)
    ConfigureCommand.register(subparsers)
    ImagesCommand.register(subparsers)
    RestoreCommand.register(subparsers)

    argcomplete.autocomplete(parser, always_complete_options=False)

    args, unknown_args = parser.parse_known_args()
    args.extra_args = unknown_args

    try:
        args.func(args)
    except OwstackError as e:
        console.print(f"[error]{escape(str(e))}[/]")
        logger.debug(e, exc_info=True)
        exit(1)
    except (KeyboardInterrupt, EOFError):
        console.print("\nAborted")
        exit(1)


if __name__ == "__main__":
    main()
