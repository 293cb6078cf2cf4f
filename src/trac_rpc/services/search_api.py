"""``search.*`` — neither method is supported yet."""

from __future__ import annotations

from trac_rpc.services.endpoint import Endpoint


class SearchApi(Endpoint):
    def search_filters(self) -> list[tuple[str, str]]:
        """Would return ``(name, description)`` pairs for each search filter."""
        self._unsupported("search.getSearchFilters")

    def search(
        self, query: str, filters: list[str] | None = None
    ) -> list[tuple[str, str, str, str, str]]:
        """Would return ``(href, title, date, author, excerpt)`` tuples."""
        self._unsupported("search.performSearch")
