import argparse
from pathlib import Path

from owstack._internal import settings
from owstack._internal.cli.commands import BaseCommand
from owstack._internal.cli.utils.common import console
from owstack._internal.core.services.host.containers import DockerContainerRuntime
from owstack._internal.core.services.images import load_images, save_images

DEFAULT_IMAGES_DIR = "docker_images_tar"


class ImagesCommand(BaseCommand):
    NAME = "images"
    DESCRIPTION = "Transfer the stack images to offline hosts"

    def _register(self):
        self._parser.set_defaults(subfunc=lambda _: self._parser.print_help())
        subparsers = self._parser.add_subparsers(dest="action")

        save_parser = subparsers.add_parser(
            "save",
            help="Pull images and save them as tar files",
            formatter_class=self._parser.formatter_class,
        )
        save_parser.add_argument(
            "images",
            help="The images to save. Defaults to all images used by the stack",
            nargs="*",
            metavar="IMAGE",
        )
        save_parser.add_argument(
            "-o",
            "--output",
            help=f"The directory to save tar files to. Defaults to [code]{DEFAULT_IMAGES_DIR}[/]",
            default=DEFAULT_IMAGES_DIR,
            metavar="DIR",
        )
        save_parser.set_defaults(subfunc=self._save)

        load_parser = subparsers.add_parser(
            "load",
            help="Load images from tar files",
            formatter_class=self._parser.formatter_class,
        )
        load_parser.add_argument(
            "input_dir",
            help=f"The directory with tar files. Defaults to [code]{DEFAULT_IMAGES_DIR}[/]",
            nargs="?",
            default=DEFAULT_IMAGES_DIR,
            metavar="DIR",
        )
        load_parser.set_defaults(subfunc=self._load)

    def _command(self, args: argparse.Namespace):
        super()._command(args)
        args.subfunc(args)

    def _save(self, args: argparse.Namespace):
        images = args.images or settings.OFFLINE_IMAGES
        output_dir = Path(args.output).expanduser().resolve()
        saved = save_images(DockerContainerRuntime(), images, output_dir)
        console.print(f"Saved {len(saved)} of {len(images)} image(s) to [code]{output_dir}[/]")

    def _load(self, args: argparse.Namespace):
        input_dir = Path(args.input_dir).expanduser().resolve()
        loaded = load_images(DockerContainerRuntime(), input_dir)
        for image in loaded:
            console.print(f"Loaded [code]{image}[/]")
        console.print(f"Loaded {len(loaded)} image(s) from [code]{input_dir}[/]")
