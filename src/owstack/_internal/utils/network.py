import re

_DOMAIN_REGEX = re.compile(r"^([a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}$")
_IPV4_REGEX = re.compile(r"^([0-9]{1,3}\.){3}[0-9]{1,3}$")


def is_valid_server_name(name: str) -> bool:
    """
    Checks that `name` looks like a multi-label domain name or a dotted-quad IPv4 address.
    Octet ranges are not checked.
    """
    return _DOMAIN_REGEX.match(name) is not None or _IPV4_REGEX.match(name) is not None
