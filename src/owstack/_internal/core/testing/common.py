from pathlib import Path
from typing import Dict, List, Optional, Sequence

from owstack._internal.core.errors import ExternalToolError
from owstack._internal.core.services.host.accelerator import AcceleratorProbe
from owstack._internal.core.services.host.archive import ArchiveTool
from owstack._internal.core.services.host.containers import ContainerRuntime, Mount
from owstack._internal.core.services.host.tls import DhParamGenerator
from owstack._internal.core.services.prompts import Prompter


class ScriptedPrompter(Prompter):
    """Answers prompts from a fixed list and records everything shown to the operator."""

    def __init__(self, answers: Sequence[str]):
        self.answers = list(answers)
        self.prompts: List[str] = []
        self.messages: List[str] = []

    def ask(self, prompt: str, password: bool = False) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError(f"No answer for prompt {prompt!r}")
        return self.answers.pop(0)

    def say(self, message: str) -> None:
        self.messages.append(message)


class StaticAcceleratorProbe(AcceleratorProbe):
    def __init__(self, available: bool):
        self.available = available
        self.calls = 0

    def is_available(self) -> bool:
        self.calls += 1
        return self.available


class FakeDhParamGenerator(DhParamGenerator):
    def __init__(self):
        self.generated: List[Path] = []

    def generate(self, path: Path, bits: int) -> None:
        path.write_text(f"-----BEGIN DH PARAMETERS-----\n{bits}\n-----END DH PARAMETERS-----\n")
        self.generated.append(path)


class FakeArchiveTool(ArchiveTool):
    def __init__(self, members: Optional[Dict[Path, List[str]]] = None):
        self.archives: Dict[Path, List[str]] = dict(members or {})
        self.extracted: List[str] = []
        self.owners: Dict[Path, str] = {}

    def create(self, archive: Path, paths: Sequence[Path]) -> None:
        self.archives[archive] = [str(p).lstrip("/") for p in paths]
        archive.write_bytes(b"")

    def list_members(self, archive: Path) -> List[str]:
        return self.archives.get(archive, [])

    def extract(self, archive: Path, member: str) -> None:
        self.extracted.append(member)

    def chown(self, path: Path, user: str) -> None:
        self.owners[path] = user


class FakeContainerRuntime(ContainerRuntime):
    def __init__(
        self,
        service_containers: Optional[Dict[str, str]] = None,
        mounts: Optional[Dict[str, List[Mount]]] = None,
        images: Optional[List[str]] = None,
        containers: Optional[Dict[str, List[str]]] = None,
        running: Optional[List[str]] = None,
        failing_images: Optional[List[str]] = None,
    ):
        self.service_containers = dict(service_containers or {})
        self.mounts = dict(mounts or {})
        self.images = list(images or [])
        # image -> container IDs
        self.containers = dict(containers or {})
        self.running = list(running or [])
        self.failing_images = list(failing_images or [])
        self.pulled: List[str] = []
        self.saved: List[Path] = []
        self.loaded: List[Path] = []
        self.stopped: List[str] = []
        self.removed_containers: List[str] = []
        self.removed_images: List[str] = []
        # archive name -> tags reported on load
        self.archive_tags: Dict[str, List[str]] = {}

    def find_service_container(self, service: str) -> Optional[str]:
        return self.service_containers.get(service)

    def get_mounts(self, container_id: str) -> List[Mount]:
        return self.mounts.get(container_id, [])

    def pull_image(self, image: str) -> None:
        if image in self.failing_images:
            raise ExternalToolError(f"Failed to pull {image}", tool="docker")
        self.pulled.append(image)

    def save_image(self, image: str, path: Path) -> None:
        path.write_bytes(image.encode())
        self.saved.append(path)

    def load_image(self, path: Path) -> List[str]:
        self.loaded.append(path)
        return self.archive_tags.get(path.name, [])

    def image_exists(self, image: str) -> bool:
        return image in self.images

    def list_containers(self, image: str, running_only: bool = False) -> List[str]:
        containers = self.containers.get(image, [])
        if running_only:
            return [c for c in containers if c in self.running]
        return list(containers)

    def stop_containers(self, container_ids: List[str]) -> None:
        self.stopped.extend(container_ids)

    def remove_containers(self, container_ids: List[str]) -> None:
        self.removed_containers.extend(container_ids)

    def remove_image(self, image: str) -> None:
        self.removed_images.append(image)
