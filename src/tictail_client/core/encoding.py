"""Query string and form body encoding.

Parameters are flattened the way the platform's form handling expects:
nested mappings and sequences use bracket notation (``a[b]=1``,
``tags[0]=x``), booleans are sent as ``1``/``0`` and ``None`` values are
dropped.
"""

from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode


def flatten_params(params: Optional[Mapping[str, Any]], prefix: Optional[str] = None) -> List[Tuple[str, str]]:
    """Flatten nested parameters into ordered ``(key, value)`` pairs.

    Args:
        params: Mapping of parameters, possibly nested
        prefix: Key of the enclosing mapping during recursion

    Returns:
        List of string pairs ready for urlencode
    """
    pairs = []
    if not params:
        return pairs

    if isinstance(params, Mapping):
        items = params.items()
    else:
        items = enumerate(params)

    for key, value in items:
        name = f"{prefix}[{key}]" if prefix is not None else str(key)

        if value is None:
            continue
        if isinstance(value, (Mapping, list, tuple)):
            pairs.extend(flatten_params(value, name))
        elif isinstance(value, bool):
            pairs.append((name, '1' if value else '0'))
        else:
            pairs.append((name, str(value)))

    return pairs


def build_query(params: Optional[Mapping[str, Any]]) -> str:
    """Encode parameters as an ``application/x-www-form-urlencoded`` string."""
    return urlencode(flatten_params(params))


def append_query(url: str, params: Optional[Mapping[str, Any]]) -> str:
    """Append encoded parameters to ``url``, respecting an existing query."""
    query = build_query(params)
    if not query:
        return url
    separator = '&' if '?' in url else '?'
    return f"{url}{separator}{query}"


def build_authorize_url(auth_url: str, response_type: str, client_id: str, redirect_url: str) -> str:
    """Build the browser authorization URL.

    ``:`` and ``/`` stay literal so a plain redirect URL reads unchanged;
    characters that would break the outer query (``?``, ``&``, ``=``,
    spaces) are percent-encoded.
    """
    query = urlencode(
        [
            ('response_type', response_type),
            ('client_id', client_id or ''),
            ('redirect_uri', redirect_url),
        ],
        safe=':/',
        quote_via=quote,
    )
    return f"{auth_url}authorize?{query}"
