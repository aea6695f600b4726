"""Tests for active index resolution."""

import pytest

from schemaform.core.option_resolver import OptionIndexResolver, resolve
from schemaform.core.values import UNDEFINED


class TestOptionIndexResolver:
    """Test OptionIndexResolver behaviour across render kinds."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resolver = OptionIndexResolver()
        self.one_of = [{"type": "number"}, {"type": "string"}]

    @pytest.mark.resolution
    def test_initial_render_uses_data(self):
        """Test that the first render delegates to structural matching."""
        assert self.resolver.resolve("foobarbaz", self.one_of) == 1

    @pytest.mark.resolution
    def test_initial_render_without_data(self):
        """Test that no data selects the first alternative."""
        assert self.resolver.resolve(UNDEFINED, self.one_of) == 0

    @pytest.mark.resolution
    def test_external_update_ignores_previous_index(self):
        """Test that external data replaces remembered UI state."""
        assert self.resolver.resolve("foobarbaz", self.one_of, 0, external=True) == 1
        assert self.resolver.resolve(12, self.one_of, 1, external=True) == 0

    @pytest.mark.resolution
    def test_internal_edit_keeps_previous_index(self):
        """Test that edits never flip the selector."""
        # The string alternative was chosen, but the user typed a number
        assert self.resolver.resolve(12, self.one_of, 1) == 1
        assert self.resolver.resolve(UNDEFINED, self.one_of, 1) == 1

    @pytest.mark.resolution
    def test_out_of_range_hint_is_recomputed(self):
        """Test that a stale index from a longer oneOf is not reused."""
        assert self.resolver.resolve("x", self.one_of, 5) == 1

    @pytest.mark.resolution
    def test_module_shortcut(self):
        """Test the module-level resolve function."""
        assert resolve("x", self.one_of) == 1
        assert resolve("x", self.one_of, previous_index=0) == 0
