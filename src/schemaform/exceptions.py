"""Custom exceptions for schemaform."""


class SchemaFormError(Exception):
    """Base exception for schemaform."""

    pass


class SchemaContractError(SchemaFormError):
    """Raised when a schema violates a precondition of the oneOf engine."""

    pass


class SchemaResolutionError(SchemaFormError):
    """Raised when a $ref cannot be resolved."""

    pass


class InvalidSelectionError(SchemaFormError):
    """Raised when a selector reports an option that does not exist."""

    pass


class UnknownFieldError(SchemaFormError):
    """Raised when an event targets a field id that is not rendered."""

    pass


class CyclicSchemaError(SchemaFormError):
    """Raised when cyclic references are detected while unfolding a schema."""

    def __init__(self, message: str, cycles=None):
        super().__init__(message)
        self.cycles = cycles or {}

    def __str__(self):
        if not self.cycles:
            return super().__str__()

        cycle_descriptions = []
        for cycle_id, cycle_refs in self.cycles.items():
            cycle_descriptions.append(f"  {cycle_id}: {' -> '.join(cycle_refs)}")

        return (
            f"{super().__str__()}\n\nDetected cycles:\n"
            + "\n".join(cycle_descriptions)
            + "\n\nSuggestion: render the recursive part with a custom field instead of unfolding it."
        )
