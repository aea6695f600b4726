"""
schemaform's library interface.

This module wraps the form engine in a small API for rendering a schema,
feeding it events and reading back the synchronized data, without depending
on the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from .core.controller import OneOfFieldProps
from .core.engine import FormConfig, FormEngine
from .core.values import UNDEFINED, without_undefined
from .core.widgets import Widget
from .exceptions import SchemaFormError, UnknownFieldError


@dataclass
class SelectionResult:
    """Outcome of applying a selector change to a schema and data pair."""

    form_data: Any = None
    active_indices: Dict[str, int] = field(default_factory=dict)
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_message is None


class FormHandle:
    """A mounted form: the rendered tree plus the data it is bound to."""

    def __init__(self, engine: FormEngine):
        self.engine = engine

    @property
    def node(self) -> Widget:
        """Root widget of the latest render."""
        return self.engine.node

    @property
    def form_data(self) -> Any:
        """Current form data; absent values are UNDEFINED."""
        return self.engine.form_data

    def json_data(self) -> Any:
        """Current form data as plain JSON values."""
        return without_undefined(self.engine.form_data)

    def set_props(self, **props) -> Widget:
        """Replace ``schema`` and/or ``form_data`` from outside the form."""
        return self.engine.set_props(**props)

    def find(self, selector: str) -> Widget:
        """Return the first widget matching ``selector`` or raise."""
        widget = self.node.query_selector(selector) if self.node else None
        if widget is None:
            raise UnknownFieldError(f"No rendered widget matches {selector!r}")
        return widget

    def simulate_change(self, target: Union[str, Widget], value: Any) -> Any:
        """Fire a change event on a widget (or selector) and return the new data."""
        widget = self.find(target) if isinstance(target, str) else target
        widget.change(value)
        return self.engine.form_data

    def select_option(self, field_id: str, option: int) -> Any:
        """Pick alternative ``option`` in the oneOf selector of ``field_id``."""
        return self.simulate_change(f"select#{field_id}__oneof_select", option)

    def active_indices(self) -> Dict[str, int]:
        return self.engine.active_indices()

    def unmount(self) -> None:
        self.engine.unmount()


class SchemaFormAPI:
    """
    Simple API for oneOf-aware schema forms.

    Usage:
        api = SchemaFormAPI()
        form = api.create_form(schema, form_data)
        form.simulate_change("#root_foo", "hello")
        form.select_option("root", 1)
        print(form.json_data())
    """

    def __init__(
        self,
        id_prefix: str = "root",
        id_separator: str = "_",
        option_label: str = "Option {n}",
        empty_string_is_undefined: bool = True,
        fields: Optional[Dict[str, Callable[[OneOfFieldProps], Widget]]] = None,
    ):
        """
        Initialize the API.

        Args:
            id_prefix: Id of the root field; nested ids are built from it
            id_separator: Joins property names and item indices into ids
            option_label: Selector label for untitled alternatives ({n} is 1-based)
            empty_string_is_undefined: Treat "" typed into an input as absent
            fields: Custom fields, e.g. {"OneOfField": renderer}
        """
        self.config = FormConfig(
            id_prefix=id_prefix,
            id_separator=id_separator,
            option_label=option_label,
            empty_string_is_undefined=empty_string_is_undefined,
        )
        self.fields = dict(fields or {})

    def create_form(
        self,
        schema: Dict[str, Any],
        form_data: Any = UNDEFINED,
        fields: Optional[Dict[str, Callable[[OneOfFieldProps], Widget]]] = None,
        on_change: Optional[Callable[[Any], None]] = None,
    ) -> FormHandle:
        """Render ``schema`` bound to ``form_data``."""
        merged_fields = dict(self.fields)
        merged_fields.update(fields or {})
        engine = FormEngine(
            schema,
            form_data=form_data,
            fields=merged_fields,
            config=self.config,
            on_change=on_change,
        )
        return FormHandle(engine)

    def resolve_indices(self, schema: Dict[str, Any], form_data: Any = UNDEFINED) -> Dict[str, int]:
        """Active index of every oneOf site when ``form_data`` is loaded."""
        return self.create_form(schema, form_data).active_indices()

    def select_option(
        self, schema: Dict[str, Any], form_data: Any, field_id: str, option: int
    ) -> SelectionResult:
        """Load the data, switch one selector and report the reconciled data."""
        try:
            form = self.create_form(schema, form_data)
            form.select_option(field_id, option)
            return SelectionResult(
                form_data=form.json_data(), active_indices=form.active_indices()
            )
        except SchemaFormError as e:
            return SelectionResult(error_message=str(e))


def create_form(
    schema: Dict[str, Any],
    form_data: Any = UNDEFINED,
    fields: Optional[Dict[str, Callable[[OneOfFieldProps], Widget]]] = None,
    config: Optional[FormConfig] = None,
    on_change: Optional[Callable[[Any], None]] = None,
) -> FormHandle:
    """Render a form with an explicit config object."""
    return FormHandle(
        FormEngine(schema, form_data=form_data, fields=fields, config=config, on_change=on_change)
    )
