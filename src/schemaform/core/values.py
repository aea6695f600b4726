"""Data value helpers: the absent-value sentinel and immutable path updates."""

from typing import Any, Sequence, Union

PathElement = Union[str, int]


class _Undefined:
    """Marker for absent data, distinct from JSON null (``None``)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNDEFINED"

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()


def is_undefined(value: Any) -> bool:
    """Check if a value is the absent-data marker."""
    return value is UNDEFINED


def get_in(data: Any, path: Sequence[PathElement]) -> Any:
    """Read the value at ``path``, returning UNDEFINED for any missing step."""
    current = data
    for key in path:
        if isinstance(current, dict):
            if key not in current:
                return UNDEFINED
            current = current[key]
        elif isinstance(current, (list, tuple)) and isinstance(key, int):
            if key < 0 or key >= len(current):
                return UNDEFINED
            current = current[key]
        else:
            return UNDEFINED
    return current


def set_in(data: Any, path: Sequence[PathElement], value: Any) -> Any:
    """Return a copy of ``data`` with ``value`` stored at ``path``.

    Containers along the path are shallow-copied; untouched branches are
    shared with the input. Storing UNDEFINED under a dict key removes the key.
    Missing intermediate containers are created as dicts (or lists for
    integer keys).
    """
    if not path:
        return value

    key, rest = path[0], path[1:]

    if isinstance(key, int) and isinstance(data, (list, tuple)):
        items = list(data)
        while len(items) <= key:
            items.append(UNDEFINED)
        items[key] = set_in(items[key], rest, value)
        return items

    if isinstance(key, int) and is_undefined(data):
        return set_in([], path, value)

    updated = dict(data) if isinstance(data, dict) else {}
    child = set_in(updated.get(key, UNDEFINED), rest, value)
    if is_undefined(child):
        updated.pop(key, None)
    else:
        updated[key] = child
    return updated


def without_undefined(data: Any) -> Any:
    """Convert a data value to plain JSON data, turning UNDEFINED into absence.

    Undefined list items become ``None`` since lists cannot have holes.
    """
    if isinstance(data, dict):
        return {
            key: without_undefined(value)
            for key, value in data.items()
            if not is_undefined(value)
        }
    if isinstance(data, (list, tuple)):
        return [None if is_undefined(item) else without_undefined(item) for item in data]
    if is_undefined(data):
        return None
    return data
