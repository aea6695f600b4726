"""Best-effort structural matching of data values against oneOf alternatives."""

from typing import Any, Callable, Dict, List, Sequence

from .values import is_undefined

# JSON Schema type name -> predicate over Python values
TYPE_PREDICATES: Dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    # integers accept any numeric value, not only integral ones
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "integer": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "null": lambda v: v is None,
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, (list, tuple)),
}


class TypeMatcher:
    """Decides which of an ordered list of subschemas a value structurally fits.

    This is deliberately weaker than validation: only ``type``, ``const``,
    ``enum``, nested ``oneOf``, ``required`` and the properties actually
    present in the value are checked. Candidates are tried in declaration order and
    the first compatible one wins.
    """

    def match(self, value: Any, candidates: Sequence[Dict[str, Any]]) -> int:
        """Return the index of the first candidate compatible with ``value``.

        Absent data and values matching no candidate both select index 0.
        """
        if is_undefined(value):
            return 0

        for index, candidate in enumerate(candidates):
            if self.is_compatible(value, candidate):
                return index

        return 0

    def is_compatible(self, value: Any, schema: Any) -> bool:
        """Check structural compatibility of ``value`` with a single schema."""
        if not isinstance(schema, dict):
            # Boolean schemas: true accepts everything, false nothing
            return schema is not False

        if "type" in schema and not self._matches_type(value, schema["type"]):
            return False

        if "const" in schema and not _json_equal(value, schema["const"]):
            return False

        if "enum" in schema and not any(
            _json_equal(value, option) for option in schema["enum"]
        ):
            return False

        if isinstance(schema.get("oneOf"), list) and schema["oneOf"]:
            if not any(self.is_compatible(value, alt) for alt in schema["oneOf"]):
                return False

        if "properties" in schema or "required" in schema:
            return self._matches_object(value, schema)

        return True

    def _matches_type(self, value: Any, declared: Any) -> bool:
        """Check value against a type name or list of type names."""
        type_names: List[str] = declared if isinstance(declared, list) else [declared]
        for type_name in type_names:
            predicate = TYPE_PREDICATES.get(type_name)
            if predicate is None or predicate(value):
                # Unknown type names are not ours to reject
                return True
        return False

    def _matches_object(self, value: Any, schema: Dict[str, Any]) -> bool:
        """Check an object value against declared properties and required keys."""
        if not isinstance(value, dict):
            return False

        properties = schema.get("properties", {})

        for key in schema.get("required", []):
            if key not in value:
                return False

        for key, subschema in properties.items():
            if key in value and not is_undefined(value[key]):
                if not self.is_compatible(value[key], subschema):
                    return False

        # A non-empty value must share at least one key with the alternative,
        # otherwise every object alternative would claim every object.
        if properties and value:
            present = [k for k in value if not is_undefined(value[k])]
            if present and not any(k in properties for k in present):
                return False

        return True


def _json_equal(left: Any, right: Any) -> bool:
    """Compare two JSON values, keeping booleans distinct from numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


_default_matcher = TypeMatcher()


def match(value: Any, candidates: Sequence[Dict[str, Any]]) -> int:
    """Module-level shortcut for :meth:`TypeMatcher.match`."""
    return _default_matcher.match(value, candidates)
