"""Schema registry for $defs/definitions lookup and reference cycle detection."""

from typing import Any, Dict, List, Set

from ..exceptions import SchemaResolutionError


class SchemaRegistry:
    """Resolves local ``$ref`` URIs of a form schema and detects cycles."""

    def __init__(self, root_schema: dict):
        """Initialize registry with root schema and detect cycles."""
        self.root_schema = root_schema
        self.definitions = self._extract_definitions(root_schema)
        self.ref_graph = self._build_reference_graph()
        self.cycles = self._detect_cycles()

    def resolve_ref(self, ref_uri: str) -> Any:
        """Resolve a $ref URI to the schema it points at."""
        if ref_uri in self.definitions:
            return self.definitions[ref_uri]
        if ref_uri == "#":
            return self.root_schema
        if ref_uri.startswith("#/"):
            return self._resolve_json_pointer(ref_uri)
        raise SchemaResolutionError(f"Unsupported reference format: {ref_uri}")

    def has_cycles(self) -> bool:
        """Check if the schema has any reference cycles."""
        return len(self.cycles) > 0

    def get_cycle_info(self) -> Dict[str, List[str]]:
        """Return detailed cycle information for debugging."""
        return self.cycles.copy()

    def _extract_definitions(self, schema: dict) -> Dict[str, Any]:
        """Extract all $defs and definitions from schema."""
        definitions = {}

        # JSON Schema Draft 2019-09+
        for name, defn in schema.get("$defs", {}).items():
            definitions[f"#/$defs/{name}"] = defn

        # Older drafts
        for name, defn in schema.get("definitions", {}).items():
            definitions[f"#/definitions/{name}"] = defn

        return definitions

    def _resolve_json_pointer(self, ref_uri: str) -> Any:
        """Walk an arbitrary ``#/a/b/0`` pointer from the root schema."""
        current: Any = self.root_schema
        for raw_token in ref_uri[2:].split("/"):
            token = raw_token.replace("~1", "/").replace("~0", "~")
            if isinstance(current, dict) and token in current:
                current = current[token]
            elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
                current = current[int(token)]
            else:
                raise SchemaResolutionError(f"Definition not found: {ref_uri}")
        return current

    def _build_reference_graph(self) -> Dict[str, Set[str]]:
        """Build directed graph of $ref dependencies."""
        graph = {}

        for def_uri, definition in self.definitions.items():
            graph[def_uri] = self._find_refs_in_schema(definition)

        root_refs = self._find_refs_in_schema(self.root_schema, skip_definitions=True)
        if root_refs:
            graph["#"] = root_refs

        return graph

    def _find_refs_in_schema(self, schema: Any, skip_definitions: bool = False) -> Set[str]:
        """Recursively find all $ref URIs in a schema."""
        refs = set()

        if isinstance(schema, dict):
            if "$ref" in schema:
                refs.add(schema["$ref"])

            for key, value in schema.items():
                if skip_definitions and key in ("$defs", "definitions"):
                    # Definitions are graph nodes of their own
                    continue
                refs.update(self._find_refs_in_schema(value))

        elif isinstance(schema, list):
            for item in schema:
                refs.update(self._find_refs_in_schema(item))

        return refs

    def _detect_cycles(self) -> Dict[str, List[str]]:
        """Detect all cycles using Tarjan's strongly connected components algorithm."""
        index_counter = [0]  # list so the nested function can update it
        stack = []
        lowlinks = {}
        index = {}
        on_stack = {}
        cycles = {}

        def strongconnect(node):
            index[node] = index_counter[0]
            lowlinks[node] = index_counter[0]
            index_counter[0] += 1
            stack.append(node)
            on_stack[node] = True

            for successor in self.ref_graph.get(node, ()):
                if successor not in self.ref_graph:
                    # External or unknown references have no outgoing edges
                    continue

                if successor not in index:
                    strongconnect(successor)
                    lowlinks[node] = min(lowlinks[node], lowlinks[successor])
                elif on_stack.get(successor, False):
                    lowlinks[node] = min(lowlinks[node], index[successor])

            if lowlinks[node] == index[node]:
                component = []
                while True:
                    w = stack.pop()
                    on_stack[w] = False
                    component.append(w)
                    if w == node:
                        break

                # More than one node, or a self-loop, is a cycle
                if len(component) > 1 or (
                    len(component) == 1 and node in self.ref_graph.get(node, set())
                ):
                    cycle_id = f"cycle_{len(cycles) + 1}"
                    cycles[cycle_id] = component

        for node in list(self.ref_graph):
            if node not in index:
                strongconnect(node)

        return cycles
