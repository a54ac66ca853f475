"""Parse the parameters Spotify sends back to the redirect URI.

Deployments differ in where the parameters end up: a plain callback path
carries them in the query string, a hash-routed page carries them after
the ``#``. Both are read; when a key appears in both, the fragment wins.
"""

from typing import Mapping, Union
from urllib.parse import parse_qsl, urlsplit

RawRedirect = Union[str, Mapping[str, object]]


def _fragment_query(fragment: str) -> str:
    # "#/callback?code=..." (hash router) or "#code=..."
    if "?" in fragment:
        return fragment.split("?", 1)[1]
    if "=" in fragment:
        return fragment
    return ""


def _first(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return "" if value is None else str(value)


def parse_redirect_params(raw: RawRedirect) -> dict[str, str]:
    """Return callback parameters from a URL, a query/fragment string or a mapping."""
    if isinstance(raw, Mapping):
        return {str(k): _first(v) for k, v in raw.items() if _first(v)}

    text = (raw or "").strip()
    parts = urlsplit(text)
    query = parts.query
    if not query and not parts.fragment and not parts.scheme and not parts.netloc and "=" in parts.path:
        query = parts.path.lstrip("?")

    params = dict(parse_qsl(query))
    params.update(parse_qsl(_fragment_query(parts.fragment)))
    return params
