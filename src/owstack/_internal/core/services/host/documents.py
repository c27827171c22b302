from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

import yaml

from owstack._internal.core.errors import ExternalToolError


class DocumentPatcher(ABC):
    """
    Edits a serialized structured document in place.
    """

    @abstractmethod
    def ensure_available(self) -> None:
        pass

    @abstractmethod
    def merge(self, path: Path, selector: List[str], fragment: Dict[str, Any]) -> None:
        """
        Merges `fragment` into the mapping found at `selector` in the document at `path`.
        Nested mappings are merged recursively, other values are replaced.
        """
        pass


class YamlDocumentPatcher(DocumentPatcher):
    def ensure_available(self) -> None:
        # Patching is done in-process with PyYAML
        pass

    def merge(self, path: Path, selector: List[str], fragment: Dict[str, Any]) -> None:
        try:
            document = yaml.safe_load(path.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ExternalToolError(f"Failed to read {path}: {e}", tool="yaml") from e
        target = document
        for key in selector:
            if not isinstance(target, dict) or key not in target:
                raise ExternalToolError(
                    f"{path} has no {'.'.join(selector)} mapping", tool="yaml"
                )
            target = target[key]
        merge_dicts(target, fragment)
        try:
            path.write_text(dump_yaml(document))
        except OSError as e:
            raise ExternalToolError(f"Failed to write {path}: {e}", tool="yaml") from e


def merge_dicts(target: Dict[str, Any], fragment: Dict[str, Any]) -> None:
    for key, value in fragment.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            merge_dicts(target[key], value)
        else:
            target[key] = value


def dump_yaml(document: Any) -> str:
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)
