"""
Query-string helpers used to keep search and pagination in the URL.

Each function takes the current query string and returns the new one;
nothing is mutated in place.
"""

from typing import Optional, Sequence, Union
from urllib.parse import parse_qsl, urlencode

ParamValue = Union[str, int, Sequence[Union[str, int]], None]


def _parse(query_string: str) -> list[tuple[str, str]]:
    return parse_qsl(query_string.lstrip("?"), keep_blank_values=True)


def _should_drop(value: ParamValue, delete_false_values: bool) -> bool:
    if value is None:
        return True
    return delete_false_values and not value


def _as_list(value: ParamValue) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def _replace(pairs: list[tuple[str, str]], key: str, values: list[str]) -> list[tuple[str, str]]:
    """Put ``values`` where ``key`` first appeared, dropping its other entries."""
    result: list[tuple[str, str]] = []
    inserted = False

    for k, v in pairs:
        if k != key:
            result.append((k, v))
        elif not inserted:
            result.extend((key, item) for item in values)
            inserted = True

    if not inserted:
        result.extend((key, item) for item in values)
    return result


def set_params(
    query_string: str,
    params: dict[str, ParamValue],
    delete_false_values: bool = True,
) -> str:
    """
    Set several parameters at once, replacing existing values.

    None removes the key; so do falsy values (0, "", []) when
    ``delete_false_values`` is set. Lists produce repeated keys.

    Example:
        >>> set_params("query=paid&page=3", {"page": 1})
        'query=paid&page=1'
    """
    pairs = _parse(query_string)

    for key, value in params.items():
        if _should_drop(value, delete_false_values):
            pairs = [(k, v) for k, v in pairs if k != key]
        else:
            pairs = _replace(pairs, key, _as_list(value))

    return urlencode(pairs)


def append_params(
    query_string: str,
    params: dict[str, ParamValue],
    delete_false_values: bool = True,
) -> str:
    """Append values to existing parameters or add new ones."""
    pairs = _parse(query_string)

    for key, value in params.items():
        if _should_drop(value, delete_false_values):
            pairs = [(k, v) for k, v in pairs if k != key]
        else:
            pairs.extend((key, item) for item in _as_list(value))

    return urlencode(pairs)


def delete_params(query_string: str, keys: Union[str, Sequence[str]]) -> str:
    """Remove one key or several keys."""
    doomed = {keys} if isinstance(keys, str) else set(keys)
    return urlencode([(k, v) for k, v in _parse(query_string) if k not in doomed])


def get_param_value(query_string: str, key: str) -> Optional[str]:
    """First value of ``key``, or None when absent."""
    for k, v in _parse(query_string):
        if k == key:
            return v
    return None
