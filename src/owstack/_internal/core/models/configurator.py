from pathlib import Path
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator
from typing_extensions import Annotated

from owstack._internal.core.consts import (
    API_KEY_PLACEHOLDER,
    COMPOSE_FILE_NAME,
    DHPARAM_FILE_NAME,
    NGINX_SITE_FILE_NAME,
    NGINX_SSL_OPTIONS_FILE_NAME,
)
from owstack._internal.core.models.common import CoreModel
from owstack._internal.utils.network import is_valid_server_name


class StorageLayout(CoreModel):
    """
    The storage root and every host path the stack mounts from it.
    """

    root: Annotated[Path, Field(description="Absolute path of the storage root")]

    @field_validator("root")
    @classmethod
    def _validate_root(cls, v: Path) -> Path:
        if not v.is_absolute():
            raise ValueError("Storage root must be an absolute path")
        return v

    @property
    def postgres_data_dir(self) -> Path:
        return self.root / "postgres_data"

    @property
    def ollama_data_dir(self) -> Path:
        return self.root / "ollama_data"

    @property
    def webui_data_dir(self) -> Path:
        return self.root / "open_webui_data"

    @property
    def nginx_conf_dir(self) -> Path:
        return self.root / "nginx_conf"

    @property
    def nginx_ssl_dir(self) -> Path:
        return self.root / "nginx_ssl"

    @property
    def nginx_site_file(self) -> Path:
        return self.nginx_conf_dir / NGINX_SITE_FILE_NAME

    @property
    def ssl_options_file(self) -> Path:
        return self.nginx_conf_dir / NGINX_SSL_OPTIONS_FILE_NAME

    @property
    def dhparam_file(self) -> Path:
        return self.nginx_ssl_dir / DHPARAM_FILE_NAME

    @property
    def compose_file(self) -> Path:
        return self.root / COMPOSE_FILE_NAME

    def certificate_dir(self, server_name: str) -> Path:
        return self.nginx_ssl_dir / server_name

    def mount_dirs(self) -> List[Path]:
        return [
            self.postgres_data_dir,
            self.ollama_data_dir,
            self.webui_data_dir,
            self.nginx_conf_dir,
            self.nginx_ssl_dir,
        ]


class ServerIdentity(CoreModel):
    name: Annotated[str, Field(description="The domain name or IPv4 address")]

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        if not is_valid_server_name(v):
            raise ValueError(f"Invalid domain or IP address: {v!r}")
        return v


class ServerIdentities(CoreModel):
    primary: ServerIdentity
    secondary: List[ServerIdentity] = []

    @property
    def all(self) -> List[ServerIdentity]:
        return [self.primary] + list(self.secondary)

    @property
    def names(self) -> List[str]:
        return [identity.name for identity in self.all]


class TopologyChoice(CoreModel):
    accelerator_present: bool = False
    upstream_api_enabled: bool = False
    upstream_api_key: Optional[str] = None
    tls_enabled: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_api_key(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        values = dict(values)
        if not values.get("upstream_api_enabled"):
            values["upstream_api_key"] = None
        elif not values.get("upstream_api_key"):
            values["upstream_api_key"] = API_KEY_PLACEHOLDER
        return values

    def update(self, **kwargs: Any) -> "TopologyChoice":
        """
        Returns a new validated choice with the given fields replaced.
        """
        return TopologyChoice.model_validate({**self.model_dump(), **kwargs})
