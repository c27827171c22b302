from pathlib import Path


def get_owstack_dir() -> Path:
    return Path.joinpath(Path.home(), ".owstack")
