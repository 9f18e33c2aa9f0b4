import re
from enum import Enum
from typing import Optional, Union
from urllib.parse import unquote

from .parsed_git_url import ParsedGitUrl, Scheme


class ParseErrorKind(Enum):
    EMPTY_INPUT = "empty input"
    UNSUPPORTED_SCHEME = "unsupported scheme"
    INVALID_PORT = "invalid port"
    MISSING_HOST = "missing host"
    MISSING_PATH = "missing path"


class ParseGitUrlError(ValueError):
    def __init__(self, kind: ParseErrorKind, text: str):
        super().__init__(f"{kind.value.capitalize()}: {text!r}.")
        self.kind = kind
        self.text = text


ParseResult = Union[ParsedGitUrl, ParseGitUrlError]

URL_SCHEMES = {
    "ssh": Scheme.SSH,
    "git+ssh": Scheme.SSH,
    "ssh+git": Scheme.SSH,
    "git": Scheme.GIT,
    "http": Scheme.HTTP,
    "https": Scheme.HTTPS,
    "file": Scheme.FILE,
}

_SCHEME_TOKEN = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")
_PORT = re.compile(r"[0-9]+")

# [user@]host:path, or [user@][ipv6]:path
_SCP_LIKE = re.compile(
    r"(?:(?P<user>[^/\\:\[\]]*)@)?"
    r"(?:\[(?P<ipv6>[^\[\]/\\]+)\]|(?P<host>[^@/\\:\[\]]+))"
    r":(?P<path>.*)",
    re.DOTALL,
)

# A leading port number means "host:port", not an SCP-like path.
_PORT_LIKE_PATH = re.compile(r"[0-9]+(?:/|\Z)")


def parse(text: str) -> ParsedGitUrl:
    """Parse a Git URL, SCP-like address or local path.

    Forms are tried in order: scheme-prefixed URL ("https://host/path"),
    SCP-like shorthand ("git@host:path"), then local path. Raises
    ParseGitUrlError with the offending substring on malformed input.
    """
    if not text:
        raise ParseGitUrlError(ParseErrorKind.EMPTY_INPUT, text)

    token, separator, rest = text.partition("://")
    if separator and _SCHEME_TOKEN.fullmatch(token):
        return parse_scheme_url(token, rest, text)

    scp_like = parse_scp_like(text)
    if scp_like is not None:
        return scp_like

    return ParsedGitUrl(Scheme.LOCAL_PATH, host=None, path=text)


def try_parse(text: str) -> ParseResult:
    """Like parse, but return the error instead of raising it."""
    try:
        return parse(text)
    except ParseGitUrlError as error:
        return error


def parse_scheme_url(token: str, rest: str, text: str) -> ParsedGitUrl:
    scheme = URL_SCHEMES.get(token.lower())
    if scheme is None:
        raise ParseGitUrlError(ParseErrorKind.UNSUPPORTED_SCHEME, token)

    if not rest:
        raise ParseGitUrlError(ParseErrorKind.MISSING_PATH, text)

    slash = rest.find("/")
    authority, path = (rest, "") if slash < 0 else (rest[:slash], rest[slash:])

    user, at, host_port = authority.rpartition("@")
    host, port_text, ipv6 = split_host_port(host_port)

    if not host and scheme is not Scheme.FILE:
        raise ParseGitUrlError(ParseErrorKind.MISSING_HOST, text)

    port = parse_port(port_text)

    if path in ("", "/"):
        raise ParseGitUrlError(ParseErrorKind.MISSING_PATH, text)

    return ParsedGitUrl(
        scheme,
        host=host,
        path=unquote(path),
        user=user if at and user else None,
        port=port,
        ipv6=ipv6,
    )


def split_host_port(host_port: str) -> tuple[str, Optional[str], bool]:
    """Split "host[:port]" or "[ipv6][:port]" into host, port text and IPv6 flag."""
    if host_port.startswith("["):
        end = host_port.find("]")
        if end < 0:
            raise ParseGitUrlError(ParseErrorKind.MISSING_HOST, host_port)
        remainder = host_port[end + 1 :]
        if remainder and not remainder.startswith(":"):
            raise ParseGitUrlError(ParseErrorKind.INVALID_PORT, remainder)
        port_text = remainder[1:] if remainder else None
        return host_port[1:end], port_text, True

    host, colon, port_text = host_port.partition(":")
    return host, port_text if colon else None, False


def parse_port(port_text: Optional[str]) -> Optional[int]:
    if not port_text:
        return None
    if not _PORT.fullmatch(port_text) or len(port_text.lstrip("0")) > 5:
        raise ParseGitUrlError(ParseErrorKind.INVALID_PORT, port_text)
    port = int(port_text)
    if port > 0xFFFF:
        raise ParseGitUrlError(ParseErrorKind.INVALID_PORT, port_text)
    return port


def parse_scp_like(text: str) -> Optional[ParsedGitUrl]:
    match = _SCP_LIKE.fullmatch(text)
    if match is None:
        return None

    user, ipv6, host, path = match.group("user", "ipv6", "host", "path")

    if user is None and host is not None and is_drive_letter(host):
        return None
    if not path:
        raise ParseGitUrlError(ParseErrorKind.MISSING_PATH, text)
    if _PORT_LIKE_PATH.match(path):
        return None

    return ParsedGitUrl(
        Scheme.SCP_LIKE,
        host=ipv6 if ipv6 is not None else host,
        path=path,
        user=user or None,
        ipv6=ipv6 is not None,
    )


def is_drive_letter(host: str) -> bool:
    return len(host) == 1 and host.isascii() and host.isalpha()
