"""Unit tests for gap-filling identifier allocation."""
import pytest
from unittest.mock import Mock

from campus_suite.core.errors import AllocationExhausted, StoreUnavailable, UniquenessViolation
from campus_suite.services.allocator import GapFillingAllocator, next_available_identifier


class TestNextAvailableIdentifier:
    """Test the smallest-unused-integer scan."""

    def test_empty_collection_starts_at_one(self):
        assert next_available_identifier([]) == 1

    def test_fills_smallest_gap(self):
        assert next_available_identifier([1, 2, 4, 5]) == 3

    def test_appends_when_dense(self):
        assert next_available_identifier([1, 2, 3]) == 4

    def test_gap_at_start(self):
        assert next_available_identifier([2, 3]) == 1

    def test_unsorted_input(self):
        assert next_available_identifier([5, 1, 3, 2]) == 4

    def test_duplicates_count_once(self):
        assert next_available_identifier([1, 1, 2, 2, 4]) == 3

    def test_ignores_non_positive_values(self):
        assert next_available_identifier([-1, 0, 1, 2]) == 3

    def test_fills_gap_left_by_delete(self):
        """Deleting 4 from [1..5] makes 4 the next identifier."""
        identifiers = {1, 2, 3, 4, 5}
        identifiers.discard(4)
        assert next_available_identifier(identifiers) == 4


class TestGapFillingAllocator:
    """Test allocation against a mocked store."""

    def test_inserts_under_first_candidate(self):
        store = Mock()
        store.list_identifiers.return_value = [1, 2, 3, 5]
        store.insert.side_effect = lambda collection, identifier, document: document

        allocator = GapFillingAllocator(store, "loans", "loan_id", max_attempts=3)
        document = allocator.insert(lambda identifier: {"title": "Laptop Loan"})

        assert document == {"title": "Laptop Loan", "loan_id": 4}
        store.insert.assert_called_once_with("loans", 4, {"title": "Laptop Loan", "loan_id": 4})

    def test_retries_after_concurrent_insert(self):
        """A lost race rescans and takes the next free identifier."""
        store = Mock()
        store.list_identifiers.side_effect = [[1, 2, 3], [1, 2, 3, 4]]
        store.insert.side_effect = [
            UniquenessViolation("loans", 4),
            {"loan_id": 5},
        ]

        allocator = GapFillingAllocator(store, "loans", "loan_id", max_attempts=3)
        document = allocator.insert(lambda identifier: {})

        assert document == {"loan_id": 5}
        assert store.insert.call_count == 2
        assert store.insert.call_args_list[1].args[1] == 5

    def test_exhaustion_raises(self):
        store = Mock()
        store.list_identifiers.return_value = []
        store.insert.side_effect = UniquenessViolation("loans", 1)

        allocator = GapFillingAllocator(store, "loans", "loan_id", max_attempts=3)

        with pytest.raises(AllocationExhausted):
            allocator.insert(lambda identifier: {})

        assert store.insert.call_count == 3

    def test_exhaustion_is_a_store_unavailable(self):
        assert issubclass(AllocationExhausted, StoreUnavailable)

    def test_store_failure_propagates_without_retry(self):
        store = Mock()
        store.list_identifiers.return_value = [1]
        store.insert.side_effect = StoreUnavailable("Document store unavailable: timeout")

        allocator = GapFillingAllocator(store, "products", "product_id", max_attempts=5)

        with pytest.raises(StoreUnavailable):
            allocator.insert(lambda identifier: {})

        store.insert.assert_called_once()

    def test_listing_failure_propagates(self):
        store = Mock()
        store.list_identifiers.side_effect = StoreUnavailable("Document store unavailable")

        allocator = GapFillingAllocator(store, "products", "product_id")

        with pytest.raises(StoreUnavailable):
            allocator.insert(lambda identifier: {})
        store.insert.assert_not_called()

    def test_next_identifier_does_not_reserve(self):
        store = Mock()
        store.list_identifiers.return_value = [1, 2, 4, 5]

        allocator = GapFillingAllocator(store, "banners", "banner_id")

        assert allocator.next_identifier() == 3
        assert allocator.next_identifier() == 3
        store.insert.assert_not_called()
