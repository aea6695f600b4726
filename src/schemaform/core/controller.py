"""Per-site orchestration of oneOf resolution, rendering and reconciliation."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..exceptions import InvalidSelectionError
from .index_store import ActiveIndexStore, SiteKey, format_site
from .option_resolver import OptionIndexResolver
from .reconciler import DataReconciler
from .values import UNDEFINED, set_in
from .widgets import Option, Widget

logger = logging.getLogger(__name__)

# (field name or None for the whole slice, new value) -> None
FieldEmitter = Callable[[Optional[str], Any], None]
# (alternative schema, alternative index, data slice, emitter) -> widgets
OptionRenderer = Callable[[Dict[str, Any], int, Any, FieldEmitter], List[Widget]]


@dataclass
class OneOfFieldProps:
    """Everything a substitute selector-and-branch renderer receives."""

    one_of: Sequence[Dict[str, Any]]
    data: Any
    active_index: int
    on_selector_change: Callable[[Any], None]
    id: str
    render_option: Callable[[int], List[Widget]]


class OneOfController:
    """Owns the active index of one oneOf site for the duration of a render.

    The index itself lives in the shared ActiveIndexStore under ``site`` so it
    survives the controller being rebuilt on the next render pass.
    """

    def __init__(
        self,
        site: SiteKey,
        store: ActiveIndexStore,
        render_option: OptionRenderer,
        emit: Callable[[Any], None],
        field_id: str = "root",
        selector_id: Optional[str] = None,
        sibling_properties: Iterable[str] = (),
        option_label: str = "Option {n}",
        custom_field: Optional[Callable[[OneOfFieldProps], Widget]] = None,
        resolver: Optional[OptionIndexResolver] = None,
        reconciler: Optional[DataReconciler] = None,
    ):
        self.site = site
        self.store = store
        self.render_option = render_option
        self.emit = emit
        self.field_id = field_id
        self.selector_id = selector_id or f"{field_id}__oneof_select"
        self.sibling_properties = tuple(sibling_properties)
        self.option_label = option_label
        self.custom_field = custom_field
        self.resolver = resolver or OptionIndexResolver()
        self.reconciler = reconciler or DataReconciler()

        self.data: Any = UNDEFINED
        self.one_of: Sequence[Dict[str, Any]] = ()

    @property
    def active_index(self) -> Optional[int]:
        """Currently held index; None until the first render."""
        return self.store.get(self.site)

    def render(
        self, data_slice: Any, one_of: Sequence[Dict[str, Any]], is_external: bool
    ) -> Tuple[Widget, List[Widget]]:
        """Resolve the active alternative and render the site.

        Returns:
            (selector, active_fields). When a custom field is registered the
            first element is the substitute's widget and the list is empty.
        """
        self.data = data_slice
        self.one_of = one_of

        index = self.resolver.resolve(
            data_slice, one_of, self.store.get(self.site), external=is_external
        )
        self.store.set(self.site, index)

        if self.custom_field is not None:
            props = OneOfFieldProps(
                one_of=one_of,
                data=data_slice,
                active_index=index,
                on_selector_change=self._handle_select,
                id=self.field_id,
                render_option=self._render_alternative,
            )
            return self.custom_field(props), []

        return self._render_selector(index), self._render_alternative(index)

    def on_selector_change(self, new_index: int) -> Any:
        """Switch to ``new_index`` and return the reconciled data slice."""
        if not 0 <= new_index < len(self.one_of):
            raise InvalidSelectionError(
                f"Option {new_index} does not exist at {format_site(self.site)} "
                f"({len(self.one_of)} options)"
            )

        old_index = self.active_index
        if old_index is None:
            old_index = self.resolver.resolve(self.data, self.one_of)

        reconciled = self.reconciler.reconcile(
            self.data, old_index, new_index, self.one_of, self.sibling_properties
        )
        self.store.set(self.site, new_index)
        self.data = reconciled

        logger.debug(
            "Selected option %d at %s (was %d)", new_index, format_site(self.site), old_index
        )
        return reconciled

    def on_field_change(self, property_name: Optional[str], value: Any) -> Any:
        """Merge an edited value into the slice without touching the index.

        ``property_name`` None replaces the whole slice, which is how scalar
        alternatives report edits.
        """
        if property_name is None:
            self.data = value
        else:
            self.data = set_in(self.data, [property_name], value)
        return self.data

    def _render_selector(self, index: int) -> Widget:
        options = [
            Option(value=str(i), label=self._option_title(option, i))
            for i, option in enumerate(self.one_of)
        ]
        return Widget(
            kind="select",
            id=self.selector_id,
            value=str(index),
            options=options,
            on_change=self._handle_select,
        )

    def _render_alternative(self, index: int) -> List[Widget]:
        return self.render_option(
            self.one_of[index], index, self.data, self._handle_field
        )

    def _option_title(self, option: Dict[str, Any], index: int) -> str:
        if isinstance(option, dict) and option.get("title"):
            return option["title"]
        return self.option_label.format(n=index + 1)

    def _handle_select(self, raw_value: Any) -> None:
        self.emit(self.on_selector_change(parse_option_value(raw_value)))

    def _handle_field(self, property_name: Optional[str], value: Any) -> None:
        self.emit(self.on_field_change(property_name, value))


def parse_option_value(raw_value: Any) -> int:
    """Turn a selector event payload ("1" or 1) into an option index."""
    if isinstance(raw_value, bool):
        raise InvalidSelectionError(f"Invalid option value: {raw_value!r}")
    if isinstance(raw_value, int):
        return raw_value
    try:
        return int(str(raw_value).strip())
    except ValueError:
        raise InvalidSelectionError(f"Invalid option value: {raw_value!r}")
