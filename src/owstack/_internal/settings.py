import os

from owstack import version
from owstack._internal.utils.env import environ

OWSTACK_VERSION = os.getenv("OWSTACK_VERSION", version.__version__)

CLI_LOG_LEVEL = os.getenv("OWSTACK_CLI_LOG_LEVEL", "INFO").upper()
CLI_FILE_LOG_LEVEL = os.getenv("OWSTACK_CLI_FILE_LOG_LEVEL", "DEBUG").upper()
# Can be used to disable control characters (e.g. for testing).
CLI_RICH_FORCE_TERMINAL = environ.get_bool("OWSTACK_CLI_RICH_FORCE_TERMINAL")

POSTGRES_IMAGE = os.getenv("OWSTACK_POSTGRES_IMAGE", "postgres:latest")
# The same Ollama image serves both CPU and GPU hosts.
OLLAMA_IMAGE = os.getenv("OWSTACK_OLLAMA_IMAGE", "ollama/ollama:latest")
WEBUI_IMAGE = os.getenv("OWSTACK_WEBUI_IMAGE", "ghcr.io/open-webui/open-webui:main")
WEBUI_CUDA_IMAGE = os.getenv("OWSTACK_WEBUI_CUDA_IMAGE", "ghcr.io/open-webui/open-webui:cuda")
NGINX_IMAGE = os.getenv("OWSTACK_NGINX_IMAGE", "nginx:latest")

DHPARAM_BITS = environ.get_int("OWSTACK_DHPARAM_BITS", default=2048)

# Images transferred by `owstack images save`
OFFLINE_IMAGES = [
    WEBUI_IMAGE,
    WEBUI_CUDA_IMAGE,
    POSTGRES_IMAGE,
    OLLAMA_IMAGE,
    NGINX_IMAGE,
]
