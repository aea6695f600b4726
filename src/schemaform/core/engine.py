"""Form rendering: walks a schema, builds the widget tree and routes edits."""

import logging
import math
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..exceptions import SchemaContractError
from ..utils.schema_keys import declares_scalar_type, schema_type
from .controller import OneOfController, OneOfFieldProps
from .index_store import ActiveIndexStore, SiteKey, format_site
from .option_resolver import OptionIndexResolver
from .reconciler import DataReconciler
from .unfolding_processor import unfold
from .values import UNDEFINED, PathElement, get_in, is_undefined, set_in
from .widgets import Widget

logger = logging.getLogger(__name__)

_NOT_GIVEN = object()

INPUT_TYPES = {
    "string": "text",
    "number": "number",
    "integer": "number",
    "boolean": "checkbox",
    "null": "hidden",
}


@dataclass
class FormConfig:
    """Configuration for form rendering."""

    id_prefix: str = "root"
    id_separator: str = "_"
    option_label: str = "Option {n}"  # fallback label, n is 1-based
    empty_string_is_undefined: bool = True


class FormEngine:
    """Renders a schema into widgets and keeps form data in sync with edits.

    External updates (construction, :meth:`set_props`) re-resolve every oneOf
    site from the data. Edits made through the widgets are internal updates:
    the active alternatives stay as they were.
    """

    def __init__(
        self,
        schema: Dict[str, Any],
        form_data: Any = UNDEFINED,
        fields: Optional[Dict[str, Callable[[OneOfFieldProps], Widget]]] = None,
        config: Optional[FormConfig] = None,
        on_change: Optional[Callable[[Any], None]] = None,
    ):
        self.config = config or FormConfig()
        self.fields = dict(fields or {})
        self.on_change = on_change
        self.store = ActiveIndexStore()
        self.resolver = OptionIndexResolver()
        self.reconciler = DataReconciler()

        self.schema: Dict[str, Any] = {}
        self.form_data: Any = UNDEFINED
        self.node: Optional[Widget] = None
        self._sites: Dict[SiteKey, str] = {}

        self.set_props(schema=schema, form_data=form_data)

    def set_props(self, schema: Any = _NOT_GIVEN, form_data: Any = _NOT_GIVEN) -> Widget:
        """Replace schema and/or form data from outside and re-render."""
        if schema is not _NOT_GIVEN:
            self.schema = unfold(schema)
        if form_data is not _NOT_GIVEN:
            self.form_data = form_data
        return self.render(external=True)

    def render(self, external: bool = False) -> Widget:
        """Rebuild the widget tree from the current schema and data."""
        self._sites = {}
        children = self._render_schema(
            self.schema,
            self.form_data,
            [],
            "#",
            self.config.id_prefix,
            self._commit,
            external,
        )
        self.node = Widget(kind="form", children=children)
        self.store.prune(self._sites)
        logger.debug(
            "Rendered form (%s update) with %d oneOf site(s)",
            "external" if external else "internal",
            len(self._sites),
        )
        return self.node

    def unmount(self) -> None:
        """Tear down the form; all transient selector state is discarded."""
        self.store.clear()
        self._sites = {}
        self.node = None

    def active_indices(self) -> Dict[str, int]:
        """Active index of every rendered oneOf site, keyed by readable site name."""
        return {
            format_site(site): self.store.get(site)
            for site in self._sites
            if site in self.store
        }

    def site_ids(self) -> Dict[str, str]:
        """Field id of every rendered oneOf site, keyed by readable site name."""
        return {format_site(site): field_id for site, field_id in self._sites.items()}

    def _commit(self, new_data: Any) -> None:
        self.form_data = new_data
        self.render(external=False)
        if self.on_change is not None:
            self.on_change(self.form_data)

    def _child_id(self, field_id: str, key: PathElement) -> str:
        return f"{field_id}{self.config.id_separator}{key}"

    def _render_schema(
        self,
        schema: Any,
        data: Any,
        path: List[PathElement],
        schema_path: str,
        field_id: str,
        emit: Callable[[Any], None],
        external: bool,
    ) -> List[Widget]:
        """Render one schema node; ``emit`` receives the node's new value."""
        if not isinstance(schema, dict):
            return []

        if "oneOf" in schema:
            check_one_of(schema["oneOf"], schema_path)
            if "properties" not in schema:
                site_widgets = self._render_site(
                    schema["oneOf"],
                    data,
                    path,
                    f"{schema_path}/oneOf",
                    field_id,
                    emit,
                    external,
                    object_site="type" in schema and not declares_scalar_type(schema),
                )
                return [Widget(kind="div", label=schema.get("title"), children=site_widgets)]

        kind = schema_type(schema)
        if kind == "object":
            return [self._render_object(schema, data, path, schema_path, field_id, emit, external)]
        if kind == "array":
            return [self._render_array(schema, data, path, schema_path, field_id, emit, external)]
        return [self._render_input(schema, data, field_id, emit, path)]

    def _render_object(self, schema, data, path, schema_path, field_id, emit, external) -> Widget:
        properties = schema.get("properties", {})
        children: List[Widget] = []
        for name, subschema in properties.items():
            children.extend(
                self._render_schema(
                    subschema,
                    get_in(data, [name]),
                    path + [name],
                    f"{schema_path}/properties/{name}",
                    self._child_id(field_id, name),
                    partial(_emit_property, emit, data, name),
                    external,
                )
            )

        if "oneOf" in schema:
            # Alternatives extend this object: they share its data slice and id
            children.extend(
                self._render_site(
                    schema["oneOf"],
                    data,
                    path,
                    f"{schema_path}/oneOf",
                    field_id,
                    emit,
                    external,
                    sibling_properties=properties.keys(),
                    object_site=True,
                )
            )

        return Widget(kind="fieldset", id=field_id, label=schema.get("title"), children=children)

    def _render_array(self, schema, data, path, schema_path, field_id, emit, external) -> Widget:
        items_schema = schema.get("items")
        children: List[Widget] = []
        if isinstance(items_schema, dict) and isinstance(data, (list, tuple)):
            for index, item in enumerate(data):
                children.extend(
                    self._render_schema(
                        items_schema,
                        item,
                        path + [index],
                        f"{schema_path}/items",
                        self._child_id(field_id, index),
                        partial(_emit_property, emit, data, index),
                        external,
                    )
                )
        return Widget(kind="fieldset", id=field_id, label=schema.get("title"), children=children)

    def _render_input(self, schema, data, field_id, emit, path) -> Widget:
        kind = schema_type(schema)
        attrs = {}
        if "enum" in schema:
            attrs["choices"] = list(schema["enum"])
        label = schema.get("title")
        if label is None and path:
            label = str(path[-1])
        return Widget(
            kind="input",
            id=field_id,
            label=label,
            value=None if is_undefined(data) else data,
            input_type=INPUT_TYPES.get(kind, "text"),
            on_change=lambda raw: emit(self.coerce_input(raw, schema)),
            attrs=attrs,
        )

    def _render_site(
        self,
        one_of: List[Dict[str, Any]],
        data: Any,
        path: List[PathElement],
        schema_path: str,
        field_id: str,
        emit: Callable[[Any], None],
        external: bool,
        sibling_properties: Iterable[str] = (),
        object_site: bool = False,
    ) -> List[Widget]:
        """Hand a oneOf occurrence to its controller and return its widgets.

        At an object site untyped alternatives such as ``{"required": [...]}``
        constrain the enclosing object and render no input of their own.
        """
        site = (tuple(path), schema_path)
        # Nested sites at the same data path get numbered selector ids
        same_id = sum(1 for fid in self._sites.values() if fid == field_id)
        self._sites[site] = field_id
        siblings = tuple(sibling_properties)

        def render_option(option, index, slice_, emit_field) -> List[Widget]:
            option_path = f"{schema_path}/{index}"
            extends_object = isinstance(option, dict) and (
                "properties" in option or (object_site and not declares_scalar_type(option))
            )
            if not extends_object:
                return self._render_schema(
                    option, slice_, path, option_path, field_id, partial(emit_field, None), external
                )

            widgets: List[Widget] = []
            for name, subschema in option.get("properties", {}).items():
                if name in siblings:
                    # Already rendered by the enclosing object
                    continue
                widgets.extend(
                    self._render_schema(
                        subschema,
                        get_in(slice_, [name]),
                        path + [name],
                        f"{option_path}/properties/{name}",
                        self._child_id(field_id, name),
                        partial(emit_field, name),
                        external,
                    )
                )
            if "oneOf" in option:
                check_one_of(option["oneOf"], option_path)
                widgets.extend(
                    self._render_site(
                        option["oneOf"],
                        slice_,
                        path,
                        f"{option_path}/oneOf",
                        field_id,
                        partial(emit_field, None),
                        external,
                        sibling_properties=set(siblings) | set(option.get("properties", {})),
                        object_site=True,
                    )
                )
            return widgets

        controller = OneOfController(
            site=site,
            store=self.store,
            render_option=render_option,
            emit=emit,
            field_id=field_id,
            selector_id=f"{field_id}__oneof_select" + (f"_{same_id}" if same_id else ""),
            sibling_properties=siblings,
            option_label=self.config.option_label,
            custom_field=self.fields.get("OneOfField"),
            resolver=self.resolver,
            reconciler=self.reconciler,
        )
        selector, active_fields = controller.render(data, one_of, external)
        return [selector] + active_fields

    def coerce_input(self, raw: Any, schema: Dict[str, Any]) -> Any:
        """Convert a raw leaf event payload into a data value."""
        if not isinstance(raw, str):
            return raw
        if raw == "" and self.config.empty_string_is_undefined:
            return UNDEFINED
        if schema_type(schema) in ("number", "integer"):
            return as_number(raw)
        return raw


def _emit_property(emit: Callable[[Any], None], data: Any, key: PathElement, value: Any) -> None:
    emit(set_in(data, [key], value))


def check_one_of(one_of: Any, schema_path: str) -> None:
    """Reject oneOf declarations the resolution engine cannot work with."""
    if not isinstance(one_of, list) or not one_of:
        raise SchemaContractError(
            f"oneOf at {schema_path} must be a non-empty list of schemas"
        )


def as_number(raw: str) -> Any:
    """Parse numeric text, keeping partial input like ``"1."`` and non-finite
    values like ``"nan"`` as text."""
    text = raw.strip()
    if text.endswith(".") or text in ("-", "+"):
        return raw
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return raw
    # "nan" and "inf" parse but are not JSON numbers
    return number if math.isfinite(number) else raw
