import ipaddress
import re
from urllib.parse import urlparse

from .errors import InvalidUrl

MAX_URL_LENGTH = 255
DEFAULT_PORTS = {"http": 80, "https": 443}
HOST_LABEL = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")


def _is_valid_host(host: str) -> bool:
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True

    if re.fullmatch(r"[0-9.]+", host):
        try:
            ipaddress.IPv4Address(host)
        except ValueError:
            return False
        return True

    try:
        ascii_host = host.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    labels = ascii_host.rstrip(".").split(".")
    return all(HOST_LABEL.match(label) for label in labels)


def normalize_url(input_url: str) -> str:
    raw_url = (input_url or "").strip()
    if not raw_url:
        raise InvalidUrl("URL is empty")
    if len(raw_url) > MAX_URL_LENGTH:
        raise InvalidUrl(f"URL is longer than {MAX_URL_LENGTH} characters")

    try:
        parsed = urlparse(raw_url)
        port = parsed.port
    except ValueError as e:
        raise InvalidUrl(f"cannot parse {raw_url!r}: {e}") from e

    scheme = parsed.scheme.lower()
    host = parsed.hostname
    if scheme not in DEFAULT_PORTS or not host:
        raise InvalidUrl(f"{raw_url!r} is not an http(s) URL with a host")
    if not _is_valid_host(host):
        raise InvalidUrl(f"{host!r} is not a valid host name")

    if ":" in host:
        host = f"[{host}]"
    normalized = f"{scheme}://{host}"
    if port is not None and port != DEFAULT_PORTS[scheme]:
        normalized += f":{port}"
    return normalized
