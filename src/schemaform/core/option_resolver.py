"""Active-alternative resolution for oneOf sites."""

from typing import Any, Dict, Optional, Sequence

from .type_matcher import TypeMatcher


class OptionIndexResolver:
    """Computes the active alternative of a oneOf site from its data slice."""

    def __init__(self, matcher: Optional[TypeMatcher] = None):
        self.matcher = matcher or TypeMatcher()

    def resolve(
        self,
        data_slice: Any,
        one_of: Sequence[Dict[str, Any]],
        previous_index: Optional[int] = None,
        external: bool = False,
    ) -> int:
        """Return the active index for ``data_slice``.

        Args:
            data_slice: The data currently held at the site
            one_of: The site's alternatives, in declaration order
            previous_index: Index held from the previous render, if any
            external: True when the caller replaced the form data

        Returns:
            The remembered index for internal edits, otherwise the index of
            the first alternative the data structurally matches.
        """
        if previous_index is None or external:
            return self.matcher.match(data_slice, one_of)

        if not 0 <= previous_index < len(one_of):
            # The schema lost alternatives since the index was stored
            return self.matcher.match(data_slice, one_of)

        return previous_index


_default_resolver = OptionIndexResolver()


def resolve(
    data_slice: Any,
    one_of: Sequence[Dict[str, Any]],
    previous_index: Optional[int] = None,
    external: bool = False,
) -> int:
    """Module-level shortcut for :meth:`OptionIndexResolver.resolve`."""
    return _default_resolver.resolve(data_slice, one_of, previous_index, external)
