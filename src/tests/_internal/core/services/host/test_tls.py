import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from owstack._internal.core.errors import ExternalToolError
from owstack._internal.core.services.host.tls import OpensslDhParamGenerator

MODULE = "owstack._internal.core.services.host.tls"


class TestOpensslDhParamGenerator:
    def test_runs_openssl(self, tmp_path: Path):
        path = tmp_path / "dhparam.pem"
        with (
            patch(f"{MODULE}.shutil.which", return_value="/usr/bin/openssl"),
            patch(f"{MODULE}.subprocess.run", return_value=Mock(returncode=0)) as run,
        ):
            OpensslDhParamGenerator().generate(path, 2048)
        assert run.call_args.args[0] == ["openssl", "dhparam", "-out", str(path), "2048"]

    def test_not_installed(self, tmp_path: Path):
        with patch(f"{MODULE}.shutil.which", return_value=None):
            with pytest.raises(ExternalToolError) as e:
                OpensslDhParamGenerator().generate(tmp_path / "dhparam.pem", 2048)
        assert e.value.tool == "openssl"

    def test_failure(self, tmp_path: Path):
        r = Mock(returncode=1, stderr=b"bad bits")
        with (
            patch(f"{MODULE}.shutil.which", return_value="/usr/bin/openssl"),
            patch(f"{MODULE}.subprocess.run", return_value=r),
        ):
            with pytest.raises(ExternalToolError, match="bad bits"):
                OpensslDhParamGenerator().generate(tmp_path / "dhparam.pem", 2048)

    def test_timeout(self, tmp_path: Path):
        with (
            patch(f"{MODULE}.shutil.which", return_value="/usr/bin/openssl"),
            patch(
                f"{MODULE}.subprocess.run",
                side_effect=subprocess.TimeoutExpired(["openssl"], 600),
            ),
        ):
            with pytest.raises(ExternalToolError, match="did not generate"):
                OpensslDhParamGenerator().generate(tmp_path / "dhparam.pem", 2048)
