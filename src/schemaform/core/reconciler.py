"""Data reconciliation across oneOf alternative switches."""

from typing import Any, Dict, Iterable, Sequence, Set

from ..utils.schema_keys import declared_properties, declares_scalar_type
from .values import UNDEFINED


class DataReconciler:
    """Derives the data carried forward when the active alternative changes."""

    def reconcile(
        self,
        old_data: Any,
        old_index: int,
        new_index: int,
        one_of: Sequence[Dict[str, Any]],
        sibling_properties: Iterable[str] = (),
    ) -> Any:
        """Compute the data slice for ``new_index``.

        Object sites keep every key except those declared by the other
        alternatives and not also declared by the new alternative or by the
        enclosing schema (``sibling_properties``). Data that is not an object,
        or a switch to an alternative declaring a non-object ``type``, resets
        to UNDEFINED.
        ``old_data`` is never modified.
        """
        if old_index == new_index:
            return old_data

        new_option = one_of[new_index]
        if not isinstance(old_data, dict) or declares_scalar_type(new_option):
            return UNDEFINED

        discard = self.exclusive_keys(new_index, one_of, sibling_properties)
        return {key: value for key, value in old_data.items() if key not in discard}

    def exclusive_keys(
        self,
        keep_index: int,
        one_of: Sequence[Dict[str, Any]],
        sibling_properties: Iterable[str] = (),
    ) -> Set[str]:
        """Keys owned only by alternatives other than ``keep_index``."""
        protected = set(sibling_properties) | declared_properties(one_of[keep_index])

        owned: Set[str] = set()
        for index, option in enumerate(one_of):
            if index != keep_index:
                owned |= declared_properties(option)

        return owned - protected


_default_reconciler = DataReconciler()


def reconcile(
    old_data: Any,
    old_index: int,
    new_index: int,
    one_of: Sequence[Dict[str, Any]],
    sibling_properties: Iterable[str] = (),
) -> Any:
    """Module-level shortcut for :meth:`DataReconciler.reconcile`."""
    return _default_reconciler.reconcile(
        old_data, old_index, new_index, one_of, sibling_properties
    )
