from typing import Any, Dict, List

from owstack._internal import settings
from owstack._internal.core.consts import (
    BACKEND_NETWORK,
    DHPARAM_FILE_NAME,
    FRONTEND_NETWORK,
    HTTP_PORT,
    HTTPS_PORT,
    NGINX_CONTAINER_SITE_PATH,
    NGINX_CONTAINER_SSL_DIR,
    NGINX_CONTAINER_SSL_OPTIONS_PATH,
    NGINX_SERVICE,
    OLLAMA_PORT,
    OLLAMA_SERVICE,
    POSTGRES_CONTAINER,
    POSTGRES_DB,
    POSTGRES_PASSWORD,
    POSTGRES_SERVICE,
    POSTGRES_USER,
    WEBUI_SERVICE,
)
from owstack._internal.core.models.compose import (
    ComposeService,
    DependencyCondition,
    DeviceReservation,
    HealthCheck,
    Network,
    ServiceTopology,
)
from owstack._internal.core.models.configurator import (
    ServerIdentities,
    StorageLayout,
    TopologyChoice,
)
from owstack._internal.core.services.host.documents import dump_yaml


def build_service_topology(
    layout: StorageLayout, identities: ServerIdentities, choices: TopologyChoice
) -> ServiceTopology:
    """
    Builds the compose services without accelerator reservations.
    Those are added by `get_accelerator_patches()` after the file is written.
    """
    return ServiceTopology(
        services={
            POSTGRES_SERVICE: _get_postgres_service(layout),
            OLLAMA_SERVICE: _get_ollama_service(layout),
            WEBUI_SERVICE: _get_webui_service(layout, choices),
            NGINX_SERVICE: _get_nginx_service(layout, identities, choices),
        },
        networks={
            FRONTEND_NETWORK: Network(),
            BACKEND_NETWORK: Network(),
        },
    )


def get_webui_image(accelerator_present: bool) -> str:
    if accelerator_present:
        return settings.WEBUI_CUDA_IMAGE
    return settings.WEBUI_IMAGE


def get_webui_environment(choices: TopologyChoice) -> Dict[str, str]:
    env = {
        "OLLAMA_BASE_URL": f"http://{OLLAMA_SERVICE}:{OLLAMA_PORT}",
        "ENABLE_OPENAI_API": "true" if choices.upstream_api_enabled else "false",
        "DATABASE_URL": (
            f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_CONTAINER}/{POSTGRES_DB}"
        ),
    }
    if choices.upstream_api_enabled and choices.upstream_api_key is not None:
        env["OPENAI_API_KEY"] = choices.upstream_api_key
    return env


def get_accelerator_patches() -> Dict[str, Dict[str, Any]]:
    """
    Returns compose fragments to merge into each accelerated service, keyed by service name.
    """
    # Fragments must not share objects, PyYAML dumps shared objects as aliases
    return {
        OLLAMA_SERVICE: {
            "deploy": DeviceReservation().to_deploy(),
            "environment": {"NVIDIA_VISIBLE_DEVICES": "all"},
        },
        WEBUI_SERVICE: {
            "deploy": DeviceReservation().to_deploy(),
        },
    }


def serialize_topology(topology: ServiceTopology) -> str:
    return dump_yaml(topology.to_compose())


def _get_postgres_service(layout: StorageLayout) -> ComposeService:
    return ComposeService(
        image=settings.POSTGRES_IMAGE,
        container_name=POSTGRES_CONTAINER,
        environment={
            "POSTGRES_USER": POSTGRES_USER,
            "POSTGRES_PASSWORD": POSTGRES_PASSWORD,
            "POSTGRES_DB": POSTGRES_DB,
        },
        volumes=[f"{layout.postgres_data_dir}:/var/lib/postgresql/data"],
        healthcheck=HealthCheck(test=["CMD-SHELL", f"pg_isready -U {POSTGRES_USER}"]),
        networks=[BACKEND_NETWORK],
    )


def _get_ollama_service(layout: StorageLayout) -> ComposeService:
    return ComposeService(
        image=settings.OLLAMA_IMAGE,
        container_name=OLLAMA_SERVICE,
        tty=True,
        volumes=[f"{layout.ollama_data_dir}:/root/.ollama"],
        depends_on={POSTGRES_SERVICE: DependencyCondition.HEALTHY},
        networks=[BACKEND_NETWORK],
    )


def _get_webui_service(layout: StorageLayout, choices: TopologyChoice) -> ComposeService:
    return ComposeService(
        image=get_webui_image(choices.accelerator_present),
        container_name=WEBUI_SERVICE,
        environment=get_webui_environment(choices),
        volumes=[f"{layout.webui_data_dir}:/app/backend/data"],
        depends_on={
            OLLAMA_SERVICE: DependencyCondition.STARTED,
            POSTGRES_SERVICE: DependencyCondition.HEALTHY,
        },
        extra_hosts=["host.docker.internal:host-gateway"],
        networks=[BACKEND_NETWORK],
    )


def _get_nginx_service(
    layout: StorageLayout, identities: ServerIdentities, choices: TopologyChoice
) -> ComposeService:
    ports = [f"{HTTP_PORT}:{HTTP_PORT}"]
    volumes = [
        f"{layout.nginx_site_file}:{NGINX_CONTAINER_SITE_PATH}",
        f"{layout.ssl_options_file}:{NGINX_CONTAINER_SSL_OPTIONS_PATH}",
    ]
    if choices.tls_enabled:
        ports.append(f"{HTTPS_PORT}:{HTTPS_PORT}")
        volumes.append(f"{layout.dhparam_file}:{NGINX_CONTAINER_SSL_DIR}/{DHPARAM_FILE_NAME}")
        volumes.extend(_get_certificate_mounts(layout, identities))
    return ComposeService(
        image=settings.NGINX_IMAGE,
        container_name=NGINX_SERVICE,
        ports=ports,
        volumes=volumes,
        depends_on={WEBUI_SERVICE: DependencyCondition.STARTED},
        networks=[FRONTEND_NETWORK, BACKEND_NETWORK],
    )


def _get_certificate_mounts(layout: StorageLayout, identities: ServerIdentities) -> List[str]:
    return [
        f"{layout.certificate_dir(name)}:{NGINX_CONTAINER_SSL_DIR}/{name}"
        for name in identities.names
    ]
