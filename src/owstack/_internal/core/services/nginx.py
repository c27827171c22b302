import importlib.resources
from typing import List, Optional

import jinja2
from typing_extensions import Literal

from owstack._internal.core.consts import (
    CERTIFICATE_FILE_NAME,
    CERTIFICATE_KEY_FILE_NAME,
    DHPARAM_FILE_NAME,
    HTTP_PORT,
    HTTPS_PORT,
    NGINX_CONTAINER_SSL_DIR,
    NGINX_CONTAINER_SSL_OPTIONS_PATH,
    WEBUI_PORT,
    WEBUI_SERVICE,
)
from owstack._internal.core.models.common import CoreModel
from owstack._internal.core.models.configurator import ServerIdentities, TopologyChoice

PROXY_TIMEOUT_SECONDS = 3600
WEBUI_UPSTREAM = f"http://{WEBUI_SERVICE}:{WEBUI_PORT}"


class ProxyRoute(CoreModel):
    type: str
    server_name: str
    tls: bool = False

    @property
    def certificate_path(self) -> Optional[str]:
        if not self.tls:
            return None
        return f"{NGINX_CONTAINER_SSL_DIR}/{self.server_name}/{CERTIFICATE_FILE_NAME}"

    @property
    def certificate_key_path(self) -> Optional[str]:
        if not self.tls:
            return None
        return f"{NGINX_CONTAINER_SSL_DIR}/{self.server_name}/{CERTIFICATE_KEY_FILE_NAME}"

    def render(self) -> str:
        template = read_package_resource(f"{self.type}.jinja2")
        render_dict = self.model_dump()
        render_dict.update(
            certificate_path=self.certificate_path,
            certificate_key_path=self.certificate_key_path,
            ssl_options_path=NGINX_CONTAINER_SSL_OPTIONS_PATH,
            dhparam_path=f"{NGINX_CONTAINER_SSL_DIR}/{DHPARAM_FILE_NAME}",
            http_port=HTTP_PORT,
            https_port=HTTPS_PORT,
        )
        return jinja2.Template(template, trim_blocks=True, lstrip_blocks=True).render(
            **render_dict
        )


class PrimaryRoute(ProxyRoute):
    """Serves the web UI."""

    type: Literal["primary"] = "primary"
    upstream: str = WEBUI_UPSTREAM
    timeout: int = PROXY_TIMEOUT_SECONDS


class RedirectRoute(ProxyRoute):
    """Sends every request to the primary server name, keeping path and query."""

    type: Literal["redirect"] = "redirect"
    redirect_to: str


class ProxyDescriptor(CoreModel):
    primary: PrimaryRoute
    redirects: List[RedirectRoute] = []

    @property
    def routes(self) -> List[ProxyRoute]:
        return [self.primary, *self.redirects]

    @property
    def upstream_service(self) -> str:
        return WEBUI_SERVICE

    def render(self) -> str:
        return "\n\n".join(route.render() for route in self.routes) + "\n"


def build_proxy_descriptor(
    identities: ServerIdentities, choices: TopologyChoice
) -> ProxyDescriptor:
    primary_name = identities.primary.name
    return ProxyDescriptor(
        primary=PrimaryRoute(server_name=primary_name, tls=choices.tls_enabled),
        redirects=[
            RedirectRoute(
                server_name=identity.name,
                tls=choices.tls_enabled,
                redirect_to=primary_name,
            )
            for identity in identities.secondary
        ],
    )


def get_ssl_options() -> str:
    return read_package_resource("options-ssl-nginx.conf")


def read_package_resource(file: str) -> str:
    return (
        importlib.resources.files("owstack._internal.core")
        .joinpath(f"resources/nginx/{file}")
        .read_text()
    )
