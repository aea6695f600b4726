"""Rendered form tree.

Widgets are plain data: the engine rebuilds the whole tree after every event,
so a widget obtained before a change describes the form as it was then.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional


@dataclass
class Option:
    """One entry of a select widget. ``value`` is the positional index as text."""

    value: str
    label: str


@dataclass
class Widget:
    """A node in the rendered form tree."""

    kind: str
    id: Optional[str] = None
    label: Optional[str] = None
    value: Any = None
    input_type: Optional[str] = None
    options: List[Option] = field(default_factory=list)
    children: List["Widget"] = field(default_factory=list)
    on_change: Optional[Callable[[Any], None]] = field(default=None, repr=False)
    attrs: Dict[str, Any] = field(default_factory=dict)

    def change(self, value: Any) -> None:
        """Dispatch a change event carrying ``value`` to this widget's handler."""
        if self.on_change is not None:
            self.on_change(value)

    def iter_descendants(self) -> Iterator["Widget"]:
        """Depth-first walk over all widgets below this one."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def query_selector_all(self, selector: str) -> List["Widget"]:
        """Find descendants matching ``kind``, ``#id`` or ``kind#id``."""
        kind, _, widget_id = selector.partition("#")
        return [
            w
            for w in self.iter_descendants()
            if (not kind or w.kind == kind) and (not widget_id or w.id == widget_id)
        ]

    def query_selector(self, selector: str) -> Optional["Widget"]:
        """First descendant matching ``selector``, or None."""
        matches = self.query_selector_all(selector)
        return matches[0] if matches else None

    def to_dict(self) -> Dict[str, Any]:
        """Serializable description of the subtree (handlers omitted)."""
        result: Dict[str, Any] = {"kind": self.kind}
        if self.id is not None:
            result["id"] = self.id
        if self.label is not None:
            result["label"] = self.label
        if self.input_type is not None:
            result["type"] = self.input_type
        if self.kind in ("input", "select"):
            result["value"] = self.value
        if self.options:
            result["options"] = [{"value": o.value, "label": o.label} for o in self.options]
        if self.attrs:
            result["attrs"] = dict(self.attrs)
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result
