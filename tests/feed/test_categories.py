"""Tests for category path resolution."""

import pytest

from catalogfeed.domain.exceptions import CyclicCategoryGraphError
from catalogfeed.domain.value_objects import CategoryNode
from catalogfeed.feed.categories import CategoryPathResolver


class TestBuild:
    """Tests for resolving paths from category rows."""

    def test_root_path_is_own_name(self) -> None:
        """Roots resolve to their own name."""
        resolver = CategoryPathResolver.build([CategoryNode(1, 0, "Shoes")])
        assert resolver.path_for(1) == "Shoes"

    def test_child_path_includes_ancestors(self) -> None:
        """A path is the parent path, the separator and the own name."""
        resolver = CategoryPathResolver.build(
            [
                CategoryNode(3, 2, "Trail"),
                CategoryNode(2, 1, "Running"),
                CategoryNode(1, 0, "Shoes"),
            ]
        )
        assert resolver.path_for(2) == "Shoes>Running"
        assert resolver.path_for(3) == "Shoes>Running>Trail"

    def test_custom_separator(self) -> None:
        """The tree separator is configurable."""
        resolver = CategoryPathResolver.build(
            [CategoryNode(1, 0, "Shoes"), CategoryNode(2, 1, "Running")],
            separator="/",
        )
        assert resolver.path_for(2) == "Shoes/Running"

    def test_unknown_parent_is_treated_as_root(self) -> None:
        """Orphans resolve to their own name."""
        resolver = CategoryPathResolver.build([CategoryNode(5, 99, "Orphan")])
        assert resolver.path_for(5) == "Orphan"

    def test_none_parent_is_root(self) -> None:
        """A missing parent ID marks a root."""
        resolver = CategoryPathResolver.build([CategoryNode(1, None, "Shoes")])
        assert resolver.path_for(1) == "Shoes"

    def test_empty_names_are_ignored(self) -> None:
        """Categories without a name are skipped."""
        resolver = CategoryPathResolver.build(
            [CategoryNode(1, 0, "Shoes"), CategoryNode(2, 1, "  "), CategoryNode(3, 0, None)]
        )
        assert 1 in resolver
        assert 2 not in resolver
        assert 3 not in resolver
        assert len(resolver) == 1

    def test_cycle_raises(self) -> None:
        """Parent loops are reported instead of looping forever."""
        with pytest.raises(CyclicCategoryGraphError) as exc_info:
            CategoryPathResolver.build(
                [CategoryNode(1, 2, "A"), CategoryNode(2, 1, "B")]
            )
        assert exc_info.value.details["cycle"] == [1, 2, 1]

    def test_self_parent_raises(self) -> None:
        """A category that is its own parent is a cycle."""
        with pytest.raises(CyclicCategoryGraphError):
            CategoryPathResolver.build([CategoryNode(7, 7, "Self")])


class TestPathsFor:
    """Tests for reducing a product's categories to the most specific paths."""

    @pytest.fixture
    def resolver(self, categories: list[CategoryNode]) -> CategoryPathResolver:
        """Resolver for the shared test tree."""
        return CategoryPathResolver.build(categories)

    def test_ancestor_is_dropped(self, resolver: CategoryPathResolver) -> None:
        """A product in Shoes and Running lists only Shoes>Running."""
        assert resolver.paths_for([1, 2]) == ["Shoes>Running"]

    def test_unrelated_paths_are_kept_sorted(self, resolver: CategoryPathResolver) -> None:
        """Paths from different branches are all kept, sorted."""
        assert resolver.paths_for([2, 3]) == ["Bags", "Shoes>Running"]

    def test_unknown_ids_are_ignored(self, resolver: CategoryPathResolver) -> None:
        """IDs without a path are skipped."""
        assert resolver.paths_for([42, 3]) == ["Bags"]

    def test_no_path_is_prefix_of_another(self, resolver: CategoryPathResolver) -> None:
        """No remaining path is a strict prefix of another."""
        paths = resolver.paths_for([1, 2, 3])
        for path in paths:
            assert not any(other != path and other.startswith(path) for other in paths)

    def test_no_categories(self, resolver: CategoryPathResolver) -> None:
        """A product without categories has no paths."""
        assert resolver.paths_for([]) == []
