import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from owstack._internal.core.errors import ExternalToolError
from owstack._internal.utils.logging import get_logger

OPENSSL_TIMEOUT = 600
logger = get_logger(__name__)


class DhParamGenerator(ABC):
    @abstractmethod
    def generate(self, path: Path, bits: int) -> None:
        pass


class OpensslDhParamGenerator(DhParamGenerator):
    def generate(self, path: Path, bits: int) -> None:
        if shutil.which("openssl") is None:
            raise ExternalToolError("openssl is not installed", tool="openssl")
        logger.info("Generating %s-bit DH parameters at %s", bits, path)
        cmd = ["openssl", "dhparam", "-out", str(path), str(bits)]
        try:
            r = subprocess.run(cmd, capture_output=True, timeout=OPENSSL_TIMEOUT)
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(
                f"openssl did not generate DH parameters in {OPENSSL_TIMEOUT}s", tool="openssl"
            ) from e
        if r.returncode != 0:
            raise ExternalToolError(
                f"Error generating DH parameters:\n{r.stderr.decode()}", tool="openssl"
            )
