import getpass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from owstack._internal.core.consts import OLLAMA_SERVICE
from owstack._internal.core.errors import ExternalToolError, PathError
from owstack._internal.core.services.host.archive import ArchiveTool
from owstack._internal.core.services.host.containers import ContainerRuntime, Mount
from owstack._internal.utils.logging import get_logger

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
logger = get_logger(__name__)


def get_backup_file_name(service: str, timestamp: datetime) -> str:
    return f"{service}_volumes_backup_{timestamp.strftime(BACKUP_TIMESTAMP_FORMAT)}.tar"


def get_service_mounts(runtime: ContainerRuntime, service: str) -> List[Mount]:
    container_id = runtime.find_service_container(service)
    if container_id is None:
        raise ExternalToolError(
            f"Container for service {service} not found. Is the service running?", tool="docker"
        )
    mounts = runtime.get_mounts(container_id)
    if not mounts:
        raise ExternalToolError(f"No volumes found for service {service}", tool="docker")
    for mount in mounts:
        logger.debug("Found mount %s:%s", mount.source, mount.destination)
    return mounts


def backup_service_volumes(
    runtime: ContainerRuntime,
    archive: ArchiveTool,
    backup_dir: Path,
    service: str = OLLAMA_SERVICE,
    timestamp: Optional[datetime] = None,
) -> Path:
    """
    Archives every host path mounted into the service container.
    Returns the path of the created archive.
    """
    mounts = get_service_mounts(runtime, service)
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathError(f"Cannot create backup directory {backup_dir}: {e}") from e
    backup_file = backup_dir / get_backup_file_name(service, timestamp or datetime.now())
    logger.info("Creating archive %s", backup_file)
    archive.create(backup_file, [mount.source for mount in mounts])
    archive.chown(backup_file, getpass.getuser())
    return backup_file


def find_latest_backup(backup_dir: Path, service: str = OLLAMA_SERVICE) -> Path:
    backups = [p for p in backup_dir.glob(f"{service}_volumes_backup_*.tar") if p.is_file()]
    if not backups:
        raise PathError(f"No backups of service {service} found in {backup_dir}")
    return max(backups, key=lambda p: p.stat().st_mtime)


def restore_service_volumes(
    runtime: ContainerRuntime,
    archive: ArchiveTool,
    backup_file: Path,
    service: str = OLLAMA_SERVICE,
) -> List[Path]:
    """
    Extracts each mount's host path from the archive. Mounts missing
    from the archive are skipped. Returns the restored host paths.
    """
    if not backup_file.is_file():
        raise PathError(f"Backup file {backup_file} does not exist")
    mounts = get_service_mounts(runtime, service)
    members = archive.list_members(backup_file)
    restored = []
    for mount in mounts:
        member = str(mount.source).lstrip("/")
        if not _archive_contains(members, member):
            logger.warning("No backup data found for mount %s. Skipping", mount.destination)
            continue
        logger.info("Restoring %s <- %s", mount.source, mount.destination)
        archive.extract(backup_file, member)
        restored.append(mount.source)
    return restored


def _archive_contains(members: List[str], path: str) -> bool:
    path = path.rstrip("/")
    return any(m.rstrip("/") == path or m.startswith(f"{path}/") for m in members)
