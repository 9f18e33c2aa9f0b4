from typing import Optional

from giturlparse import parse

from .parsed_git_url import ParsedGitUrl


def project_namespace(url: ParsedGitUrl) -> str:
    return url.path.removesuffix(".git").removeprefix("/")


def hosting_platform(url: ParsedGitUrl) -> Optional[str]:
    """Name of the hosting platform serving the URL, e.g. "github" or "gitlab".

    Local paths and URLs giturlparse cannot make sense of have no platform.
    """
    if url.is_local:
        return None

    git_url = parse(str(url))
    # "base" is giturlparse's catch-all for unrecognised hosts.
    if not git_url.valid or git_url.platform == "base":
        return None

    return git_url.platform
