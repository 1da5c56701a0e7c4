"""Category path resolution.

Turns the flat (id, parent_id, name) category rows of one language into
full paths such as "Shoes>Running", and reduces the categories of a
product to the most specific paths only.
"""

from collections.abc import Iterable, Mapping

from catalogfeed.domain.exceptions import CyclicCategoryGraphError
from catalogfeed.domain.value_objects import CategoryNode


class CategoryPathResolver:
    """Resolves category IDs to ancestor paths.

    Paths are built once per run and never change afterwards. Categories
    with an empty name are ignored; a category whose parent is unknown is
    treated as a root.

    Example usage:
        resolver = CategoryPathResolver.build(
            [CategoryNode(1, 0, "Shoes"), CategoryNode(2, 1, "Running")],
        )
        resolver.path_for(2)            # "Shoes>Running"
        resolver.paths_for([1, 2])      # ["Shoes>Running"]
    """

    def __init__(self, paths: Mapping[int, str], separator: str = ">") -> None:
        """Initialize resolver with already resolved paths.

        Args:
            paths: Category ID to full path.
            separator: Separator placed between ancestor names.
        """
        self._paths = dict(paths)
        self.separator = separator

    @classmethod
    def build(
        cls,
        categories: Iterable[CategoryNode],
        separator: str = ">",
    ) -> "CategoryPathResolver":
        """Resolve the paths of all categories.

        Args:
            categories: Category rows of one language, in any order.
            separator: Separator placed between ancestor names.

        Returns:
            Resolver holding every resolved path.

        Raises:
            CyclicCategoryGraphError: If parent links form a loop.
        """
        names: dict[int, str] = {}
        parents: dict[int, int] = {}
        for category in categories:
            name = (category.name or "").strip()
            if not name:
                continue
            names[category.id] = name
            parents[category.id] = category.parent_id or 0

        paths: dict[int, str] = {}
        for category_id in names:
            cls._resolve(category_id, names, parents, paths, separator)
        return cls(paths, separator)

    @staticmethod
    def _resolve(
        category_id: int,
        names: dict[int, str],
        parents: dict[int, int],
        paths: dict[int, str],
        separator: str,
    ) -> None:
        # Walk up to the first resolved ancestor or a root...
        chain: list[int] = []
        visiting: set[int] = set()
        current = category_id
        while current not in paths:
            if current in visiting:
                loop = chain[chain.index(current):] + [current]
                raise CyclicCategoryGraphError(loop)
            visiting.add(current)
            chain.append(current)
            parent_id = parents[current]
            if parent_id == 0 or parent_id not in names:
                break
            current = parent_id

        # ...then resolve back down the chain.
        for node in reversed(chain):
            parent_id = parents[node]
            if parent_id != 0 and parent_id in paths:
                paths[node] = paths[parent_id] + separator + names[node]
            else:
                paths[node] = names[node]

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._paths

    def path_for(self, category_id: int) -> str | None:
        """Get the full path of a category.

        Args:
            category_id: Category ID.

        Returns:
            Path if the category is known, None otherwise.
        """
        return self._paths.get(category_id)

    def paths_for(self, category_ids: Iterable[int]) -> list[str]:
        """Get the most specific paths for a product's categories.

        Paths are sorted and any path that is a string prefix of the next
        one is dropped, so "Shoes" disappears next to "Shoes>Running".
        Unknown IDs are ignored.

        Args:
            category_ids: Categories the product is linked to.

        Returns:
            Sorted list of the remaining paths.
        """
        paths = sorted(
            path for path in (self._paths.get(cid) for cid in category_ids) if path
        )
        return [
            path
            for path, following in zip(paths, paths[1:] + [None])
            if following is None or not following.startswith(path)
        ]
