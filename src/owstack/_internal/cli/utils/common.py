import logging
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm
from rich.theme import Theme

from owstack._internal import settings
from owstack._internal.utils.common import get_owstack_dir

_colors = {
    "secondary": "grey58",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "code": "bold sea_green3",
}

console = Console(theme=Theme(_colors), force_terminal=settings.CLI_RICH_FORCE_TERMINAL)


def _get_cli_log_file() -> Path:
    """Get the CLI log file path, rotating the previous log if needed."""
    log_dir = get_owstack_dir() / "logs" / "cli"
    log_file = log_dir / "latest.log"

    if log_file.exists():
        file_mtime = datetime.fromtimestamp(log_file.stat().st_mtime, tz=timezone.utc)
        current_date = datetime.now(timezone.utc).date()

        if file_mtime.date() < current_date:
            date_str = file_mtime.strftime("%Y-%m-%d")
            rotated_file = log_dir / f"{date_str}.log"

            counter = 1
            while rotated_file.exists():
                rotated_file = log_dir / f"{date_str}-{counter}.log"
                counter += 1

            log_file.rename(rotated_file)

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_file


def configure_logging():
    owstack_logger = logging.getLogger("owstack")
    owstack_logger.handlers.clear()

    log_file = _get_cli_log_file()

    stdout_handler = RichHandler(console=console, show_time=False, show_path=False)
    stdout_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    stdout_handler.setLevel(settings.CLI_LOG_LEVEL)
    owstack_logger.addHandler(stdout_handler)

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    file_handler.setLevel(settings.CLI_FILE_LOG_LEVEL)
    owstack_logger.addHandler(file_handler)

    # the logger allows all messages, filtering is done by the handlers
    owstack_logger.setLevel(logging.DEBUG)


def confirm_ask(prompt, **kwargs) -> bool:
    kwargs["console"] = console
    return Confirm.ask(prompt=prompt, **kwargs)


def warn(message: str):
    if not message.endswith("\n"):
        # Additional blank line for better visibility if there are more than one warning
        message = f"{message}\n"
    console.print(f"[warning][bold]{message}[/]")
