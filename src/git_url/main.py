from argparse import ArgumentParser
from dotenv import load_dotenv
from git.exc import InvalidGitRepositoryError, NoSuchPathError
from git.repo import Repo
from json import dumps
from os import getenv
from typing import NoReturn, Optional

from git_url.hosting import hosting_platform, project_namespace
from git_url.parsed_git_url import ParsedGitUrl
from git_url.parser import ParseGitUrlError, parse


version = "0.1.0"
program = "git-url"

output_formats = ["text", "json"]


def main(argv: Optional[list[str]] = None):
    parser = ArgumentParser(prog=program, description="Parse Git repository URLs.")
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {version}"
    )
    parser.add_argument("-f", "--format", choices=output_formats, action="store")
    parser.add_argument("-r", "--remote", action="store")
    parser.add_argument("-j", "--join", action="store", metavar="CHILD")
    parser.add_argument("--pop", action="store_true")
    parser.add_argument("urls", nargs="*", metavar="URL")

    args = parser.parse_args(argv)

    load_dotenv()

    output_format = args.format or get_output_format()
    urls = list(args.urls)
    if args.remote or not urls:
        urls.append(get_remote_url(args.remote or get_default_remote()))

    for url in urls:
        git_url = parse_or_fail(url)
        if args.pop:
            git_url = pop_or_fail(git_url)
        if args.join:
            git_url = join_or_fail(git_url, args.join)
        print(format_git_url(git_url, output_format))


def get_output_format() -> str:
    output_format = getenv("GITURL_FORMAT", "text")
    if output_format not in output_formats:
        fail(
            f"GITURL_FORMAT must be one of the following formats: {', '.join(output_formats)}."
        )
    return output_format


def get_default_remote() -> str:
    return getenv("GITURL_REMOTE") or "origin"


def get_remote_url(remote_name: str) -> str:
    try:
        repo = Repo(".", search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        fail("Not a Git repository.")

    if remote_name not in [remote.name for remote in repo.remotes]:
        fail(f"Remote {remote_name} does not exist.")

    return repo.remote(remote_name).url


def parse_or_fail(url: str) -> ParsedGitUrl:
    try:
        return parse(url)
    except ParseGitUrlError as error:
        fail(str(error))


def pop_or_fail(git_url: ParsedGitUrl) -> ParsedGitUrl:
    popped = git_url.pop()
    if popped is None:
        fail(f"Cannot remove the last path segment of {git_url}.")
    return popped


def join_or_fail(git_url: ParsedGitUrl, child_path: str) -> ParsedGitUrl:
    joined = git_url.join(child_path)
    if joined is None:
        fail(f"Cannot join {child_path} to {git_url}.")
    return joined


def describe_git_url(git_url: ParsedGitUrl) -> dict[str, object]:
    return {
        "url": str(git_url),
        "scheme": git_url.scheme.value,
        "user": git_url.user,
        "host": git_url.host,
        "port": git_url.port,
        "path": git_url.path,
        "namespace": None if git_url.is_local else project_namespace(git_url),
        "platform": hosting_platform(git_url),
    }


def format_git_url(git_url: ParsedGitUrl, output_format: str) -> str:
    fields = describe_git_url(git_url)
    if output_format == "json":
        return dumps(fields)
    return "\n".join(
        f"{key}: {'' if value is None else value}" for key, value in fields.items()
    )


def fail(message: str) -> NoReturn:
    raise SystemExit(f"{program} error: {message}")