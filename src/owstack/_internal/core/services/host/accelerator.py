import shutil
import subprocess
from abc import ABC, abstractmethod

from owstack._internal.utils.logging import get_logger

NVIDIA_SMI_TIMEOUT = 10
logger = get_logger(__name__)


class AcceleratorProbe(ABC):
    @abstractmethod
    def is_available(self) -> bool:
        """
        Returns `True` if the host has at least one usable accelerator.
        Must not raise: any failure means no accelerator.
        """
        pass


class NvidiaSmiProbe(AcceleratorProbe):
    def is_available(self) -> bool:
        if shutil.which("nvidia-smi") is None:
            logger.debug("nvidia-smi not found")
            return False
        try:
            r = subprocess.run(
                ["nvidia-smi", "-L"], capture_output=True, text=True, timeout=NVIDIA_SMI_TIMEOUT
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("nvidia-smi failed: %s", e)
            return False
        if r.returncode != 0:
            logger.debug("nvidia-smi exited with %s: %s", r.returncode, r.stderr.strip())
            return False
        gpus = [line for line in r.stdout.splitlines() if line.startswith("GPU ")]
        logger.debug("nvidia-smi reported %s GPU(s)", len(gpus))
        return len(gpus) > 0
