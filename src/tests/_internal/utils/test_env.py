import pytest

from owstack._internal.utils.env import Environ


class _TestEnviron:
    def get_environ(self, **env: str) -> Environ:
        return Environ(env)


class TestEnvironGetBool(_TestEnviron):
    @pytest.mark.parametrize(
        ["value", "expected"],
        [
            ["0", False],
            ["1", True],
            ["true", True],
            ["FALSE", False],
            ["off", False],
            ["ON", True],
        ],
    )
    def test_is_set(self, value: str, expected: bool):
        environ = self.get_environ(VAR=value)
        assert environ.get_bool("VAR") is expected

    def test_not_set_default_not_set(self):
        assert self.get_environ().get_bool("VAR") is None

    @pytest.mark.parametrize("default", [False, True])
    def test_not_set_default_is_set(self, default: bool):
        assert self.get_environ().get_bool("VAR", default=default) is default

    @pytest.mark.parametrize("value", ["", "2", "foo"])
    def test_error_bad_value(self, value: str):
        environ = self.get_environ(VAR=value)
        with pytest.raises(ValueError, match=f"VAR={value}"):
            environ.get_bool("VAR")


class TestEnvironGetInt(_TestEnviron):
    def test_is_set(self):
        environ = self.get_environ(OWSTACK_DHPARAM_BITS="4096")
        assert environ.get_int("OWSTACK_DHPARAM_BITS") == 4096

    def test_not_set_default_is_set(self):
        assert self.get_environ().get_int("VAR", default=2048) == 2048

    @pytest.mark.parametrize("value", ["", "false", "10a"])
    def test_error_bad_value(self, value: str):
        environ = self.get_environ(VAR=value)
        with pytest.raises(ValueError, match=f"VAR={value}"):
            environ.get_int("VAR")
