"""Remote list fetch result model."""

from dataclasses import dataclass

from unboundconf.models.blocklist import Category, ListKind


@dataclass
class FetchResult:
    """Outcome of fetching a single remote list.

    Exactly one of entries or error is meaningful: a successful fetch of an
    empty list leaves both unset.

    Attributes:
        category: Blocking category of the list.
        kind: Whether the list holds hostnames or IPs.
        url: URL the list was fetched from.
        entries: Unique entries of the list, None if empty or failed.
        error: Exception raised by the fetch, None on success.
    """

    category: Category
    kind: ListKind
    url: str
    entries: set[str] | None = None
    error: Exception | None = None

    def is_error(self) -> bool:
        """Check if the fetch failed.

        Returns:
            bool: True if an error was recorded, False otherwise.
        """
        return self.error is not None
