import argparse

from owstack._internal.cli.commands import BaseCommand
from owstack._internal.cli.utils.common import console, warn
from owstack._internal.cli.utils.prompts import ConsolePrompter
from owstack._internal.core.consts import (
    CERTIFICATE_FILE_NAME,
    CERTIFICATE_KEY_FILE_NAME,
    HTTP_PORT,
)
from owstack._internal.core.services.configurator import (
    ConfiguratorResult,
    TopologyConfigurator,
)
from owstack._internal.core.services.host.accelerator import NvidiaSmiProbe
from owstack._internal.core.services.host.documents import YamlDocumentPatcher
from owstack._internal.core.services.host.tls import OpensslDhParamGenerator


class ConfigureCommand(BaseCommand):
    NAME = "configure"
    DESCRIPTION = "Generate the Docker Compose file and Nginx configuration"

    def _register(self):
        self._parser.add_argument(
            "--root",
            help=(
                "The root path for Docker volumes and generated files."
                " If not set, the path is asked interactively"
            ),
            metavar="PATH",
        )

    def _command(self, args: argparse.Namespace):
        super()._command(args)
        configurator = TopologyConfigurator(
            prompter=ConsolePrompter(),
            probe=NvidiaSmiProbe(),
            patcher=YamlDocumentPatcher(),
            dhparams=OpensslDhParamGenerator(),
        )
        result = configurator.configure(root=args.root)
        for path in result.files:
            console.print(f"Wrote [code]{path}[/]")
        if result.choices.tls_enabled:
            _print_certificate_instructions(result)
        else:
            warn(
                "Nginx is configured to serve over HTTP without SSL certificates."
                f" Make sure your firewall allows traffic on port {HTTP_PORT}"
            )
        console.print(
            f"Start the stack with [code]docker compose -f {result.layout.compose_file} up -d[/]"
        )


def _print_certificate_instructions(result: ConfiguratorResult):
    console.print("\n[bold]SSL certificate setup[/]")
    console.print("Place the SSL certificates in the following directories:\n")
    for i, name in enumerate(result.identities.names):
        cert_dir = result.layout.certificate_dir(name)
        title = "Main domain" if i == 0 else "Additional domain"
        console.print(f"{title} [code]{name}[/]:")
        console.print(f"  - Private key: {cert_dir / CERTIFICATE_KEY_FILE_NAME}")
        console.print(f"  - Full chain certificate: {cert_dir / CERTIFICATE_FILE_NAME}")
    console.print()
