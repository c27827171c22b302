import re
import sys
from pathlib import Path

from setuptools import find_packages, setup

project_dir = Path(__file__).parent


def get_version():
    text = (project_dir / "src" / "owstack" / "version.py").read_text()
    match = re.compile(r"__version__\s*=\s*\"?([^\n\"]+)\"?.*").match(text)
    if match:
        if match.group(1) != "None":
            return match.group(1)
        else:
            return None
    else:
        sys.exit("Can't parse version.py")


def get_long_description():
    readme = project_dir / "README.md"
    if not readme.exists():
        return ""
    return readme.read_text()


BASE_DEPS = [
    "pyyaml",
    "typing-extensions>=4.0.0",
    "argcomplete>=3.0.0",
    "rich",
    "rich-argparse",
    "pydantic>=2.0.0",
    "jinja2",
    "docker>=6.0.0",
]

TEST_DEPS = [
    "pytest",
]

setup(
    name="owstack",
    version=get_version(),
    package_dir={"": "src"},
    packages=find_packages("src", exclude=["tests", "tests.*"]),
    package_data={
        "owstack._internal.core": ["resources/**/*"],
    },
    include_package_data=True,
    scripts=[],
    entry_points={
        "console_scripts": ["owstack=owstack._internal.cli.main:main"],
    },
    description=(
        "Operator tool for a self-hosted Open WebUI stack: compose and Nginx config generation,"
        " volume backups and offline image transfer."
    ),
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    install_requires=BASE_DEPS,
    extras_require={
        "tests": TEST_DEPS,
    },
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Topic :: System :: Systems Administration",
        "Programming Language :: Python :: 3",
    ],
)
