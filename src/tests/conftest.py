from pathlib import Path

import pytest

from owstack._internal.core.models.configurator import (
    ServerIdentities,
    ServerIdentity,
    StorageLayout,
)


@pytest.fixture
def layout(tmp_path: Path) -> StorageLayout:
    return StorageLayout(root=tmp_path / "stack")


@pytest.fixture
def identities() -> ServerIdentities:
    return ServerIdentities(
        primary=ServerIdentity(name="chat.example.com"),
        secondary=[ServerIdentity(name="api.example.com")],
    )
