from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
from urllib.parse import quote


class Scheme(Enum):
    SSH = "ssh"
    GIT = "git"
    HTTP = "http"
    HTTPS = "https"
    FILE = "file"
    SCP_LIKE = "scp"
    LOCAL_PATH = "local"


# Characters left unescaped when rendering a decoded URL path.
_PATH_SAFE = "/:@!$&'()*+,;=~"


@dataclass(frozen=True)
class ParsedGitUrl:
    scheme: Scheme
    host: Optional[str]
    path: str
    user: Optional[str] = None
    port: Optional[int] = None
    ipv6: bool = False

    def __post_init__(self):
        if (self.scheme is Scheme.LOCAL_PATH) != (
            self.host is None and self.user is None
        ):
            raise ValueError(
                f"Scheme {self.scheme.value} is inconsistent with host {self.host!r} and user {self.user!r}."
            )
        if self.scheme is not Scheme.LOCAL_PATH and self.host is None:
            raise ValueError(f"Scheme {self.scheme.value} requires a host.")
        if self.port is not None and self.host is None:
            raise ValueError(f"Port {self.port} requires a host.")
        if self.port is not None and not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"Port {self.port} is out of range.")
        if not self.path:
            raise ValueError("Path must not be empty.")

    @property
    def is_local(self) -> bool:
        return self.scheme is Scheme.LOCAL_PATH

    def pop(self) -> Optional["ParsedGitUrl"]:
        """Return a copy without the last path segment.

        None is returned when no segment would be left.
        """
        root, rest = split_root(self.path)
        popped = pop_segment(rest)
        if not popped:
            return None
        return replace(self, path=root + popped)

    def join(self, child_path: str) -> Optional["ParsedGitUrl"]:
        """Resolve a relative, slash-separated path against this URL's path.

        "." segments are skipped and ".." drops one segment. An absolute child,
        an empty segment or a ".." with nothing left to drop gives None.
        """
        root, path = split_root(self.path)
        for part in child_path.split("/"):
            if not part:
                return None
            if part == "..":
                popped = pop_segment(path)
                if popped is None:
                    return None
                path = popped
            elif part != ".":
                path = f"{path}/{part}" if path else part
        if not path:
            return None
        return replace(self, path=root + path)

    def __str__(self) -> str:
        if self.scheme is Scheme.LOCAL_PATH:
            return self.path

        host = f"[{self.host}]" if self.ipv6 else self.host
        if self.user is not None:
            host = f"{self.user}@{host}"

        if self.scheme is Scheme.SCP_LIKE:
            return f"{host}:{self.path}"

        if self.port is not None:
            host = f"{host}:{self.port}"
        return f"{self.scheme.value}://{host}{quote(self.path, safe=_PATH_SAFE)}"


def split_root(path: str) -> tuple[str, str]:
    if path.startswith("/"):
        return "/", path[1:]
    return "", path


def pop_segment(path: str) -> Optional[str]:
    if not path:
        return None
    return path[: max(path.rfind("/"), 0)]
