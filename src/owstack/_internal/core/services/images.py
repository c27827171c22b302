import json
import tarfile
from pathlib import Path
from typing import List, Optional, Sequence

from owstack._internal.core.errors import ExternalToolError, PathError
from owstack._internal.core.services.host.containers import ContainerRuntime
from owstack._internal.utils.logging import get_logger

logger = get_logger(__name__)


def image_archive_name(image: str) -> str:
    return image.replace("/", "_").replace(":", "_") + ".tar"


def save_images(runtime: ContainerRuntime, images: Sequence[str], output_dir: Path) -> List[Path]:
    """
    Pulls and saves each image to `output_dir`. Images that fail are skipped.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathError(f"Cannot create output directory {output_dir}: {e}") from e
    saved = []
    for image in images:
        logger.info("Pulling %s", image)
        try:
            runtime.pull_image(image)
        except ExternalToolError as e:
            logger.error("%s. Skipping", e)
            continue
        path = output_dir / image_archive_name(image)
        logger.info("Saving %s to %s", image, path)
        try:
            runtime.save_image(image, path)
        except ExternalToolError as e:
            logger.error("%s. Skipping", e)
            continue
        saved.append(path)
    return saved


def read_image_name(archive_path: Path) -> Optional[str]:
    """
    Returns the first tag from the `manifest.json` of an image archive.
    """
    try:
        with tarfile.open(archive_path) as tar:
            manifest_file = tar.extractfile("manifest.json")
            if manifest_file is None:
                return None
            manifest = json.load(manifest_file)
    except (KeyError, OSError, tarfile.TarError, ValueError) as e:
        logger.debug("Cannot read manifest of %s: %s", archive_path, e)
        return None
    for entry in manifest:
        tags = entry.get("RepoTags") or []
        if tags:
            return tags[0]
    return None


def load_images(runtime: ContainerRuntime, input_dir: Path) -> List[str]:
    """
    Loads every image archive in `input_dir`. Existing images with the same tag
    are removed first, together with the containers that use them.
    """
    if not input_dir.is_dir():
        raise PathError(f"Directory {input_dir} does not exist")
    loaded = []
    for archive_path in sorted(input_dir.glob("*.tar")):
        if not archive_path.is_file():
            logger.warning("Skipping %s as it is not a regular file", archive_path)
            continue
        image = read_image_name(archive_path)
        if image is None:
            logger.error("Could not determine image name from %s. Skipping", archive_path)
            continue
        if runtime.image_exists(image):
            logger.info("Image %s already exists, removing it", image)
            replace_image(runtime, image)
        logger.info("Loading %s from %s", image, archive_path)
        tags = runtime.load_image(archive_path)
        if not tags:
            logger.error("Failed to load image from %s", archive_path)
            continue
        loaded.extend(tags)
    return loaded


def replace_image(runtime: ContainerRuntime, image: str) -> None:
    running = runtime.list_containers(image, running_only=True)
    if running:
        logger.info("Stopping containers %s", ", ".join(running))
        runtime.stop_containers(running)
    containers = runtime.list_containers(image)
    if containers:
        logger.info("Removing containers %s", ", ".join(containers))
        runtime.remove_containers(containers)
    runtime.remove_image(image)
