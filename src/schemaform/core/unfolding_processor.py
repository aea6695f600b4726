"""Complete expansion of acyclic form schemas before rendering."""

from typing import Any, Dict, Set

from ..exceptions import CyclicSchemaError, SchemaFormError, SchemaResolutionError
from .schema_registry import SchemaRegistry


class UnfoldingProcessor:
    """Replaces every ``$ref`` in a schema with the schema it points at."""

    def __init__(self, registry: SchemaRegistry):
        """Initialize processor with schema registry."""
        self.registry = registry
        self.unfolding_cache: Dict[str, Any] = {}
        self._in_progress: Set[str] = set()

    def unfold_schema(self, schema: dict) -> dict:
        """
        Unfold schema or fail if cycles are detected.

        Args:
            schema: Root schema to unfold

        Returns:
            Schema with no $ref remaining. The input is not modified.

        Raises:
            CyclicSchemaError: If the reference graph has cycles
        """
        if self.registry.has_cycles():
            raise CyclicSchemaError(
                "Cyclic references detected; recursive schemas cannot be rendered.",
                cycles=self.registry.get_cycle_info(),
            )

        body = {k: v for k, v in schema.items() if k not in ("$defs", "definitions")}
        return self._complete_unfold(body)

    def _complete_unfold(self, schema: Any) -> Any:
        """
        Expand references recursively, caching each resolved URI.

        Keywords written next to a ``$ref`` (a ``title`` on an alternative,
        say) are laid over the resolved schema.
        """
        if isinstance(schema, dict) and "$ref" in schema:
            ref_uri = schema["$ref"]

            if ref_uri in self._in_progress:
                raise CyclicSchemaError(f"Reference {ref_uri} refers back to itself")

            if ref_uri not in self.unfolding_cache:
                self._in_progress.add(ref_uri)
                try:
                    resolved = self.registry.resolve_ref(ref_uri)
                    self.unfolding_cache[ref_uri] = self._complete_unfold(resolved)
                except SchemaFormError:
                    raise
                except Exception as e:
                    raise SchemaResolutionError(
                        f"Failed to resolve reference {ref_uri}: {e}"
                    ) from e
                finally:
                    self._in_progress.discard(ref_uri)

            unfolded = self.unfolding_cache[ref_uri]
            siblings = {k: v for k, v in schema.items() if k != "$ref"}
            if not siblings:
                return unfolded
            merged = dict(unfolded) if isinstance(unfolded, dict) else {}
            merged.update(self._recursive_unfold_complete(siblings))
            return merged

        return self._recursive_unfold_complete(schema)

    def _recursive_unfold_complete(self, schema: Any) -> Any:
        """Recursively unfold all nested schema structures."""
        if isinstance(schema, dict):
            return {key: self._complete_unfold(value) for key, value in schema.items()}

        elif isinstance(schema, list):
            return [self._complete_unfold(item) for item in schema]

        # Primitive values pass through unchanged
        return schema

    def clear_cache(self):
        """Clear the unfolding cache."""
        self.unfolding_cache.clear()


def unfold(schema: dict) -> dict:
    """Unfold a standalone schema using its own definitions."""
    return UnfoldingProcessor(SchemaRegistry(schema)).unfold_schema(schema)
