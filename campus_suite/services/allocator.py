"""Gap-filling sequential identifier allocation.

New entities get the smallest positive integer not currently used in their
collection, so deleted identifiers are recycled. The scan itself is a pure
function; ``GapFillingAllocator`` pairs it with the store's unique
constraint and retries when a concurrent insert wins the same candidate.
"""
from typing import Any, Callable, Dict, Iterable, Optional

from campus_suite.core.config import settings
from campus_suite.core.errors import AllocationExhausted, UniquenessViolation
from campus_suite.core.logging import get_logger


def next_available_identifier(identifiers: Iterable[int]) -> int:
    """Return the smallest positive integer missing from ``identifiers``.

    Duplicates count once and non-positive values are ignored.

    Examples:
        >>> next_available_identifier([1, 2, 4, 5])
        3
        >>> next_available_identifier([1, 2, 3])
        4
        >>> next_available_identifier([])
        1
    """
    expected = 1
    for identifier in sorted(set(identifiers)):
        if identifier < expected:
            continue
        if identifier != expected:
            return expected
        expected += 1
    return expected


class GapFillingAllocator:
    """Assigns identifiers for one collection and inserts the new document.

    Each attempt lists the live identifiers, picks the smallest gap and tries
    to insert under it. A ``UniquenessViolation`` means another request took
    that identifier in the meantime, so the scan is repeated. Every lost
    attempt corresponds to a different successful insert, which bounds the
    retries needed by the number of concurrent creators.
    """

    def __init__(
        self,
        store,
        collection: str,
        id_field: str,
        max_attempts: Optional[int] = None,
    ):
        self.store = store
        self.collection = collection
        self.id_field = id_field
        self.max_attempts = max_attempts or settings.id_allocation_max_attempts
        self.logger = get_logger(__name__, {"collection": collection})

    def next_identifier(self) -> int:
        """Compute the current candidate without reserving it."""
        return next_available_identifier(self.store.list_identifiers(self.collection))

    def insert(self, build: Callable[[int], Dict[str, Any]]) -> Dict[str, Any]:
        """Allocate an identifier and insert ``build(identifier)`` under it.

        Args:
            build: Returns the document for a candidate identifier

        Returns:
            The stored document

        Raises:
            StoreUnavailable: listing or inserting failed; nothing was assigned
            AllocationExhausted: every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.next_identifier()
            document = build(candidate)
            document[self.id_field] = candidate
            try:
                stored = self.store.insert(self.collection, candidate, document)
            except UniquenessViolation:
                self.logger.debug(
                    f"{self.collection} identifier {candidate} taken concurrently, rescanning",
                    extra={"identifier": candidate, "attempt": attempt},
                )
                continue

            if attempt > 1:
                self.logger.info(
                    f"Allocated {self.collection}/{candidate} after {attempt} attempts",
                    extra={"identifier": candidate, "attempt": attempt},
                )
            return stored

        self.logger.error(
            f"Identifier allocation for {self.collection} exhausted after {self.max_attempts} attempts",
            extra={"attempt": self.max_attempts},
        )
        raise AllocationExhausted(
            f"Could not allocate a {self.collection} identifier, please retry"
        )
