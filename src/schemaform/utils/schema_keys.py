"""Property-name extraction for object-level schemas."""

from typing import Any, Dict, Set

MAX_DEPTH = 10


def declared_properties(schema: Any) -> Set[str]:
    """Collect the property names a schema declares at its own level.

    Alternatives nested with ``oneOf`` describe the same object, so their
    properties count as declared too. Nested object properties do not.
    """
    keys: Set[str] = set()
    _extract_keys_recursive(schema, keys)
    return keys


def _extract_keys_recursive(schema: Any, keys: Set[str], depth: int = 0) -> None:
    """Recursively extract same-level keys from schema."""
    if depth > MAX_DEPTH:
        return

    if not isinstance(schema, dict):
        return

    if "properties" in schema:
        keys.update(schema["properties"].keys())

    if isinstance(schema.get("oneOf"), list):
        for subschema in schema["oneOf"]:
            _extract_keys_recursive(subschema, keys, depth + 1)


def declares_scalar_type(schema: Any) -> bool:
    """Check if a schema pins its value to a non-object ``type``.

    Schemas without a ``type`` (``{"required": [...]}``, ``{"title": ...}``)
    may still describe an object and are not scalar.
    """
    if not isinstance(schema, dict) or "type" not in schema:
        return False
    declared = schema["type"]
    type_names = declared if isinstance(declared, list) else [declared]
    return "object" not in type_names


def schema_type(schema: Dict[str, Any]) -> str:
    """Return the single type used to pick a widget for a schema."""
    declared = schema.get("type")
    if isinstance(declared, list):
        # Prefer a non-null type for ["string", "null"] style declarations
        non_null = [t for t in declared if t != "null"]
        declared = non_null[0] if non_null else "null"
    if declared:
        return declared
    if "properties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return "string"
