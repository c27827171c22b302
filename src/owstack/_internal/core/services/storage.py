from pathlib import Path
from typing import Optional

from owstack._internal.core.errors import PathError
from owstack._internal.core.models.configurator import StorageLayout
from owstack._internal.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_storage_root(path: Optional[str], default: Optional[Path] = None) -> StorageLayout:
    """
    Resolves the operator's storage root input to an absolute, existing directory.
    Blank input means `default`, or the current working directory if `default` is not set.
    """
    if path is None or not path.strip():
        root = (default or Path.cwd()).resolve()
    else:
        try:
            root = Path(path.strip()).expanduser().resolve()
        except (OSError, RuntimeError, ValueError) as e:
            raise PathError(f"Invalid root path {path!r}: {e}") from e
    if root.exists() and not root.is_dir():
        raise PathError(f"Root path {root} exists and is not a directory")
    if not root.exists():
        try:
            root.mkdir(parents=True)
        except OSError as e:
            raise PathError(f"Cannot create root path {root}: {e}") from e
        logger.info("Created root path directory %s", root)
    else:
        logger.info("Using existing root path directory %s", root)
    return StorageLayout(root=root)
