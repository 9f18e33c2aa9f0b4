from typing import Optional

from hypothesis import given, settings
from hypothesis.strategies import (
    characters,
    from_regex,
    integers,
    lists,
    none,
    one_of,
    sampled_from,
    text,
)

from git_url.parsed_git_url import ParsedGitUrl, Scheme
from git_url.parser import ParseGitUrlError, try_parse

users = one_of(none(), from_regex(r"[A-Za-z0-9._-]+", fullmatch=True))
hosts = from_regex(r"[a-z0-9][a-z0-9.-]+", fullmatch=True)
segments = text(
    alphabet=characters(exclude_categories=("Cs",), exclude_characters="/"),
    min_size=1,
)


@given(text())
@settings(max_examples=500)
def test_any_input_parses_or_fails_cleanly(value: str):
    result = try_parse(value)
    assert isinstance(result, (ParsedGitUrl, ParseGitUrlError))
    if isinstance(result, ParsedGitUrl) and result.scheme is Scheme.SCP_LIKE:
        assert result.host is not None
        assert "/" not in result.host


@given(
    scheme=sampled_from([Scheme.SSH, Scheme.GIT, Scheme.HTTP, Scheme.HTTPS, Scheme.FILE]),
    user=users,
    host=hosts,
    port=one_of(none(), integers(min_value=0, max_value=0xFFFF)),
    parts=lists(segments, min_size=1, max_size=5),
)
def test_url_fields_round_trip(
    scheme: Scheme, user: Optional[str], host: str, port: Optional[int], parts: list[str]
):
    git_url = ParsedGitUrl(
        scheme, host=host, path="/" + "/".join(parts), user=user, port=port
    )
    assert try_parse(str(git_url)) == git_url


@given(user=users, host=hosts, path=text(min_size=1).filter(lambda p: not p[0].isdigit()))
def test_scp_like_fields_round_trip(user: Optional[str], host: str, path: str):
    git_url = ParsedGitUrl(Scheme.SCP_LIKE, host=host, path=path, user=user)
    assert try_parse(str(git_url)) == git_url
