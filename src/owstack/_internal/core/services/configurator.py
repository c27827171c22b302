from pathlib import Path
from typing import List, Optional

from owstack._internal import settings
from owstack._internal.core.errors import ConfigError, PathError
from owstack._internal.core.models.common import CoreModel
from owstack._internal.core.models.configurator import (
    ServerIdentities,
    StorageLayout,
    TopologyChoice,
)
from owstack._internal.core.services.compose import (
    build_service_topology,
    get_accelerator_patches,
    serialize_topology,
)
from owstack._internal.core.services.host.accelerator import AcceleratorProbe, NvidiaSmiProbe
from owstack._internal.core.services.host.documents import DocumentPatcher, YamlDocumentPatcher
from owstack._internal.core.services.host.tls import DhParamGenerator, OpensslDhParamGenerator
from owstack._internal.core.services.nginx import build_proxy_descriptor, get_ssl_options
from owstack._internal.core.services.prompts import (
    Prompter,
    ask_storage_root,
    collect_server_identities,
    collect_tls_choice,
    collect_upstream_api_choice,
)
from owstack._internal.core.services.storage import resolve_storage_root
from owstack._internal.utils.logging import get_logger

logger = get_logger(__name__)


class ConfiguratorResult(CoreModel):
    layout: StorageLayout
    identities: ServerIdentities
    choices: TopologyChoice
    files: List[Path]


class TopologyConfigurator:
    """
    Asks the operator for the stack settings and writes the compose file,
    the nginx config and the mount tree under the storage root.
    """

    def __init__(
        self,
        prompter: Prompter,
        probe: Optional[AcceleratorProbe] = None,
        patcher: Optional[DocumentPatcher] = None,
        dhparams: Optional[DhParamGenerator] = None,
    ):
        self.prompter = prompter
        self.probe = probe or NvidiaSmiProbe()
        self.patcher = patcher or YamlDocumentPatcher()
        self.dhparams = dhparams or OpensslDhParamGenerator()

    def configure(
        self, root: Optional[str] = None, default_root: Optional[Path] = None
    ) -> ConfiguratorResult:
        default_root = default_root or Path.cwd()
        if root is None:
            root = ask_storage_root(self.prompter, str(default_root))
        layout = resolve_storage_root(root, default=default_root)
        self.patcher.ensure_available()
        identities = collect_server_identities(self.prompter)
        choices = collect_upstream_api_choice(self.prompter, TopologyChoice())
        choices = collect_tls_choice(self.prompter, choices)
        return write_artifacts(
            layout=layout,
            identities=identities,
            choices=choices,
            probe=self.probe,
            patcher=self.patcher,
            dhparams=self.dhparams,
        )


def write_artifacts(
    layout: StorageLayout,
    identities: ServerIdentities,
    choices: TopologyChoice,
    probe: AcceleratorProbe,
    patcher: DocumentPatcher,
    dhparams: DhParamGenerator,
    dhparam_bits: int = settings.DHPARAM_BITS,
) -> ConfiguratorResult:
    """
    Writes all artifacts in order. All directories are created before any file is written.
    Stops at the first failure without removing what was already written.
    """
    create_mount_directories(layout, identities, choices)
    files = []

    if choices.tls_enabled:
        dhparams.generate(layout.dhparam_file, dhparam_bits)
        files.append(layout.dhparam_file)

    write_file(layout.ssl_options_file, get_ssl_options())
    files.append(layout.ssl_options_file)

    proxy = build_proxy_descriptor(identities, choices)
    write_file(layout.nginx_site_file, proxy.render())
    files.append(layout.nginx_site_file)

    accelerator_present = probe.is_available()
    if accelerator_present:
        logger.info("GPU detected. Configuring Docker Compose for GPU usage")
    else:
        logger.info("No GPU detected. Configuring Docker Compose for CPU usage")
    choices = choices.update(accelerator_present=accelerator_present)

    topology = build_service_topology(layout, identities, choices)
    if proxy.upstream_service not in topology.services:
        raise ConfigError(f"Proxy upstream {proxy.upstream_service} is not a compose service")
    write_file(layout.compose_file, serialize_topology(topology))
    files.append(layout.compose_file)

    if accelerator_present:
        for service, fragment in get_accelerator_patches().items():
            patcher.merge(layout.compose_file, ["services", service], fragment)
        logger.debug("Added GPU reservations to %s", layout.compose_file)

    return ConfiguratorResult(
        layout=layout,
        identities=identities,
        choices=choices,
        files=files,
    )


def create_mount_directories(
    layout: StorageLayout, identities: ServerIdentities, choices: TopologyChoice
) -> List[Path]:
    dirs = layout.mount_dirs()
    if choices.tls_enabled:
        dirs += [layout.certificate_dir(name) for name in identities.names]
    for path in dirs:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PathError(f"Cannot create directory {path}: {e}") from e
    logger.debug("Created mount directories under %s", layout.root)
    return dirs


def write_file(path: Path, content: str) -> None:
    try:
        path.write_text(content)
    except OSError as e:
        raise PathError(f"Cannot write {path}: {e}") from e
    logger.debug("Wrote %s", path)
