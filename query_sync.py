"""
Derivations keeping the URL's query substring and the
Query field's segments consistent in both directions.
"""
from typing import Optional


SEPARATOR = "&"


def url_query(url: str) -> Optional[str]:
    """
    Returns the text after the first '?' of the url,
    None when the url carries no '?' at all.
    """
    # url_query {{{
    index = url.find("?")
    if index < 0:
        return None
    return url[index + 1:]
    # }}}


def replace_query(url: str, query: str) -> str:
    """
    Rewrites everything after the first '?' with
    the given query, appending a '?' when missing.
    """
    # replace_query {{{
    index = url.find("?")
    base = url if index < 0 else url[:index]
    return f"{base}?{query}"
    # }}}


def split_segments(query: str) -> list[str]:
    # split_segments {{{
    return query.split(SEPARATOR)
    # }}}


def join_segments(lines: list[str]) -> str:
    # join_segments {{{
    return SEPARATOR.join(lines)
    # }}}
