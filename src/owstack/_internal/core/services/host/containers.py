from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import docker
import docker.errors
from docker import DockerClient

from owstack._internal.core.consts import COMPOSE_SERVICE_LABEL
from owstack._internal.core.errors import ExternalToolError
from owstack._internal.core.models.common import CoreModel
from owstack._internal.utils.logging import get_logger

logger = get_logger(__name__)


class Mount(CoreModel):
    source: Path
    destination: str


class ContainerRuntime(ABC):
    @abstractmethod
    def find_service_container(self, service: str) -> Optional[str]:
        """Returns the ID of the running container of the compose `service`."""
        pass

    @abstractmethod
    def get_mounts(self, container_id: str) -> List[Mount]:
        pass

    @abstractmethod
    def pull_image(self, image: str) -> None:
        pass

    @abstractmethod
    def save_image(self, image: str, path: Path) -> None:
        pass

    @abstractmethod
    def load_image(self, path: Path) -> List[str]:
        """Loads an image archive and returns the loaded image tags."""
        pass

    @abstractmethod
    def image_exists(self, image: str) -> bool:
        pass

    @abstractmethod
    def list_containers(self, image: str, running_only: bool = False) -> List[str]:
        pass

    @abstractmethod
    def stop_containers(self, container_ids: List[str]) -> None:
        pass

    @abstractmethod
    def remove_containers(self, container_ids: List[str]) -> None:
        pass

    @abstractmethod
    def remove_image(self, image: str) -> None:
        pass


class DockerContainerRuntime(ContainerRuntime):
    """Talks to the local Docker engine through the Docker SDK."""

    def __init__(self, client: Optional[DockerClient] = None):
        self._client = client

    @property
    def client(self) -> DockerClient:
        if self._client is None:
            try:
                self._client = docker.from_env()
            except docker.errors.DockerException as e:
                raise ExternalToolError(f"Cannot connect to Docker: {e}", tool="docker") from e
        return self._client

    def find_service_container(self, service: str) -> Optional[str]:
        with _docker_errors(f"Failed to list containers of service {service}"):
            containers = self.client.containers.list(
                filters={"label": f"{COMPOSE_SERVICE_LABEL}={service}"}
            )
        if not containers:
            return None
        if len(containers) > 1:
            logger.warning(
                "Found %s containers for service %s, using %s",
                len(containers),
                service,
                containers[0].short_id,
            )
        return containers[0].id

    def get_mounts(self, container_id: str) -> List[Mount]:
        with _docker_errors(f"Failed to inspect container {container_id}"):
            container = self.client.containers.get(container_id)
        return [
            Mount(source=Path(m["Source"]), destination=m["Destination"])
            for m in container.attrs.get("Mounts") or []
        ]

    def pull_image(self, image: str) -> None:
        with _docker_errors(f"Failed to pull {image}"):
            self.client.images.pull(image)

    def save_image(self, image: str, path: Path) -> None:
        try:
            with _docker_errors(f"Failed to save {image}"):
                chunks = self.client.images.get(image).save(named=True)
                with open(path, "wb") as f:
                    for chunk in chunks:
                        f.write(chunk)
        except ExternalToolError:
            # No partial archive is left in the output directory
            path.unlink(missing_ok=True)
            raise

    def load_image(self, path: Path) -> List[str]:
        with _docker_errors(f"Failed to load image from {path}"):
            with open(path, "rb") as f:
                images = self.client.images.load(f)
        return [tag for image in images for tag in image.tags]

    def image_exists(self, image: str) -> bool:
        try:
            self.client.images.get(image)
        except docker.errors.ImageNotFound:
            return False
        except docker.errors.DockerException as e:
            raise ExternalToolError(f"Failed to inspect image {image}: {e}", tool="docker") from e
        return True

    def list_containers(self, image: str, running_only: bool = False) -> List[str]:
        with _docker_errors(f"Failed to list containers of image {image}"):
            containers = self.client.containers.list(
                all=not running_only, filters={"ancestor": image}
            )
        return [c.id for c in containers]

    def stop_containers(self, container_ids: List[str]) -> None:
        for container_id in container_ids:
            with _docker_errors(f"Failed to stop container {container_id}"):
                self.client.containers.get(container_id).stop()

    def remove_containers(self, container_ids: List[str]) -> None:
        for container_id in container_ids:
            with _docker_errors(f"Failed to remove container {container_id}"):
                self.client.containers.get(container_id).remove()

    def remove_image(self, image: str) -> None:
        with _docker_errors(f"Failed to remove image {image}"):
            self.client.images.remove(image)


@contextmanager
def _docker_errors(message: str) -> Iterator[None]:
    try:
        yield
    except (docker.errors.DockerException, OSError) as e:
        raise ExternalToolError(f"{message}: {e}", tool="docker") from e
