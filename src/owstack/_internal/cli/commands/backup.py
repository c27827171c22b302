import argparse
from pathlib import Path

from owstack._internal.cli.commands import BaseCommand
from owstack._internal.cli.utils.common import confirm_ask, console
from owstack._internal.core.consts import OLLAMA_SERVICE
from owstack._internal.core.services.backups import (
    backup_service_volumes,
    find_latest_backup,
    restore_service_volumes,
)
from owstack._internal.core.services.host.archive import SudoTarArchiveTool
from owstack._internal.core.services.host.containers import DockerContainerRuntime

DEFAULT_BACKUP_DIR = "models"


class BackupCommand(BaseCommand):
    NAME = "backup"
    DESCRIPTION = "Back up the volumes of a compose service"

    def _register(self):
        self._parser.add_argument(
            "backup_dir",
            help=f"The backup directory. Defaults to [code]{DEFAULT_BACKUP_DIR}[/]",
            nargs="?",
            default=DEFAULT_BACKUP_DIR,
            metavar="DIR",
        )
        self._parser.add_argument(
            "--service",
            help=f"The compose service. Defaults to [code]{OLLAMA_SERVICE}[/]",
            default=OLLAMA_SERVICE,
        )

    def _command(self, args: argparse.Namespace):
        super()._command(args)
        backup_file = backup_service_volumes(
            runtime=DockerContainerRuntime(),
            archive=SudoTarArchiveTool(),
            backup_dir=Path(args.backup_dir).expanduser().resolve(),
            service=args.service,
        )
        console.print(f"Backup created at [code]{backup_file}[/]")


class RestoreCommand(BaseCommand):
    NAME = "restore"
    DESCRIPTION = "Restore the volumes of a compose service from a backup"

    def _register(self):
        self._parser.add_argument(
            "backup_file",
            help="The backup archive. Defaults to the latest backup in the backup directory",
            nargs="?",
            metavar="FILE",
        )
        self._parser.add_argument(
            "--backup-dir",
            help=f"The directory with backups. Defaults to [code]{DEFAULT_BACKUP_DIR}[/]",
            default=DEFAULT_BACKUP_DIR,
            metavar="DIR",
        )
        self._parser.add_argument(
            "--service",
            help=f"The compose service. Defaults to [code]{OLLAMA_SERVICE}[/]",
            default=OLLAMA_SERVICE,
        )
        self._parser.add_argument(
            "-y", "--yes", help="Don't ask for confirmation", action="store_true"
        )

    def _command(self, args: argparse.Namespace):
        super()._command(args)
        if args.backup_file is not None:
            backup_file = Path(args.backup_file).expanduser().resolve()
        else:
            backup_dir = Path(args.backup_dir).expanduser().resolve()
            backup_file = find_latest_backup(backup_dir, service=args.service)
        if not args.yes and not confirm_ask(
            f"Overwrite the [code]{args.service}[/] volumes with [code]{backup_file}[/]?"
        ):
            console.print("\nExiting...")
            return
        restored = restore_service_volumes(
            runtime=DockerContainerRuntime(),
            archive=SudoTarArchiveTool(),
            backup_file=backup_file,
            service=args.service,
        )
        for path in restored:
            console.print(f"Restored [code]{path}[/]")
        console.print(f"Restored {len(restored)} volume(s) of [code]{args.service}[/]")
