import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from owstack._internal.core.errors import ExternalToolError

TAR_TIMEOUT = 3600


class ArchiveTool(ABC):
    """
    Creates and extracts archives of host paths. Member names are stored relative to `/`.
    """

    @abstractmethod
    def create(self, archive: Path, paths: Sequence[Path]) -> None:
        pass

    @abstractmethod
    def list_members(self, archive: Path) -> List[str]:
        pass

    @abstractmethod
    def extract(self, archive: Path, member: str) -> None:
        """Extracts `member` back to its absolute location."""
        pass

    @abstractmethod
    def chown(self, path: Path, user: str) -> None:
        pass


class SudoTarArchiveTool(ArchiveTool):
    """Runs tar as root so that files owned by container users are readable."""

    def create(self, archive: Path, paths: Sequence[Path]) -> None:
        members = [str(p).lstrip("/") for p in paths]
        cmd = sudo() + ["tar", "-cf", str(archive), "-C", "/"] + members
        _run(cmd, f"Failed to create archive {archive}")

    def list_members(self, archive: Path) -> List[str]:
        r = _run(sudo() + ["tar", "-tf", str(archive)], f"Failed to list archive {archive}")
        return [line for line in r.stdout.decode().splitlines() if line]

    def extract(self, archive: Path, member: str) -> None:
        cmd = sudo() + ["tar", "-xf", str(archive), "-C", "/", member.lstrip("/")]
        _run(cmd, f"Failed to extract {member} from {archive}")

    def chown(self, path: Path, user: str) -> None:
        _run(sudo() + ["chown", f"{user}:{user}", str(path)], f"Failed to change owner of {path}")


def _run(cmd: List[str], error: str) -> "subprocess.CompletedProcess[bytes]":
    try:
        r = subprocess.run(cmd, capture_output=True, timeout=TAR_TIMEOUT)
    except FileNotFoundError as e:
        raise ExternalToolError(f"{error}: {cmd[0]} is not installed", tool=cmd[0]) from e
    if r.returncode != 0:
        raise ExternalToolError(f"{error}:\n{r.stderr.decode()}", tool=cmd[0])
    return r


def sudo() -> List[str]:
    """Mocked in tests"""
    return ["sudo"]
