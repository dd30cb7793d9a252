"""Tests for the Redis document store and the entity repository."""
import pytest
import redis
from unittest.mock import Mock

from campus_suite.core.errors import NotFound, StoreUnavailable, UniquenessViolation
from campus_suite.infrastructure.redis import RedisDocumentStore
from campus_suite.services.entities import EntityRepository


class TestRedisDocumentStore:
    """Test store primitives against fakeredis."""

    def test_insert_and_find(self, store):
        stored = store.insert("loans", 1, {"loan_id": 1, "title": "Laptop Loan"})

        assert stored["title"] == "Laptop Loan"
        assert "created_at" in stored and "updated_at" in stored
        assert store.find("loans", 1)["title"] == "Laptop Loan"
        assert store.list_identifiers("loans") == [1]

    def test_insert_existing_identifier_is_rejected(self, store):
        store.insert("loans", 1, {"loan_id": 1, "title": "First"})

        with pytest.raises(UniquenessViolation):
            store.insert("loans", 1, {"loan_id": 1, "title": "Second"})

        assert store.find("loans", 1)["title"] == "First"

    def test_identifiers_are_listed_in_numeric_order(self, store):
        for identifier in (10, 2, 1):
            store.insert("products", identifier, {"product_id": identifier})

        assert store.list_identifiers("products") == [1, 2, 10]
        assert [d["product_id"] for d in store.find_all("products")] == [1, 2, 10]

    def test_collections_are_isolated(self, store):
        store.insert("loans", 1, {"loan_id": 1})

        assert store.list_identifiers("scholarships") == []
        assert store.find("scholarships", 1) is None

    def test_update_merges_fields(self, store):
        store.insert("loans", 1, {"loan_id": 1, "title": "Laptop Loan", "interest_rate": 0})

        updated = store.update("loans", 1, {"interest_rate": 2.5})

        assert updated["title"] == "Laptop Loan"
        assert updated["interest_rate"] == 2.5
        assert store.find("loans", 1)["interest_rate"] == 2.5

    def test_update_missing_returns_none(self, store):
        assert store.update("loans", 99, {"title": "x"}) is None

    def test_delete_frees_identifier(self, store):
        store.insert("banners", 1, {"banner_id": 1})
        store.insert("banners", 2, {"banner_id": 2})

        deleted = store.delete("banners", 1)

        assert deleted["banner_id"] == 1
        assert store.find("banners", 1) is None
        assert store.list_identifiers("banners") == [2]

    def test_delete_missing_returns_none(self, store):
        assert store.delete("banners", 7) is None

    def test_ping(self, store):
        assert store.ping() is True

    def test_unique_value_is_claimed_once(self, store):
        assert store.reserve_unique("users", "email", "ama@campus.edu") is True
        assert store.reserve_unique("users", "email", "ama@campus.edu") is False
        assert store.reserve_unique("users", "email", "kofi@campus.edu") is True

    def test_released_unique_value_can_be_claimed_again(self, store, redis_client):
        store.reserve_unique("users", "email", "ama@campus.edu")
        store.assign_unique("users", "email", "ama@campus.edu", "4")
        assert redis_client.hget("test:users:unique:email", "ama@campus.edu") == "4"

        store.release_unique("users", "email", "ama@campus.edu")

        assert store.reserve_unique("users", "email", "ama@campus.edu") is True


class TestStoreFailures:
    """Redis errors surface as StoreUnavailable."""

    def test_connection_error_maps_to_store_unavailable(self):
        client = Mock()
        client.zrange.side_effect = redis.ConnectionError("connection refused")
        store = RedisDocumentStore(redis_client=client, key_prefix="test:")

        with pytest.raises(StoreUnavailable):
            store.list_identifiers("loans")

    def test_timeout_maps_to_store_unavailable(self):
        client = Mock()
        client.get.side_effect = redis.TimeoutError("timed out")
        store = RedisDocumentStore(redis_client=client, key_prefix="test:")

        with pytest.raises(StoreUnavailable):
            store.find("loans", 1)

    def test_failed_write_releases_reservation(self):
        client = Mock()
        client.zadd.return_value = 1
        client.set.side_effect = redis.ConnectionError("connection reset")
        store = RedisDocumentStore(redis_client=client, key_prefix="test:")

        with pytest.raises(StoreUnavailable):
            store.insert("loans", 3, {"loan_id": 3})

        client.zrem.assert_called_once_with("test:loans:ids", "3")

    def test_ping_failure_returns_false(self):
        client = Mock()
        client.ping.side_effect = redis.ConnectionError("down")
        store = RedisDocumentStore(redis_client=client, key_prefix="test:")

        assert store.ping() is False


class TestEntityRepository:
    """Test CRUD through the repository."""

    def test_create_assigns_dense_identifiers(self, store):
        repo = EntityRepository(store, "products")

        ids = [repo.create({"name": f"Item {i}"})["product_id"] for i in range(3)]

        assert ids == [1, 2, 3]

    def test_create_reuses_deleted_identifier(self, store):
        repo = EntityRepository(store, "loans")
        for i in range(5):
            repo.create({"title": f"Loan {i}"})

        repo.delete(4)

        assert repo.create({"title": "Refill"})["loan_id"] == 4
        assert repo.create({"title": "Next"})["loan_id"] == 6

    def test_get_missing_raises_not_found(self, store):
        repo = EntityRepository(store, "loans")

        with pytest.raises(NotFound) as exc_info:
            repo.get(42)

        assert exc_info.value.message == "Loan not found"

    def test_update_never_rewrites_identifier(self, store):
        repo = EntityRepository(store, "products")
        repo.create({"name": "Hoodie"})

        updated = repo.update(1, {"product_id": 9, "name": "Campus Hoodie"})

        assert updated["product_id"] == 1
        assert updated["name"] == "Campus Hoodie"

    def test_delete_missing_raises_not_found(self, store):
        with pytest.raises(NotFound):
            EntityRepository(store, "orders").delete(1)

    def test_find_by(self, store):
        repo = EntityRepository(store, "user_orders")
        repo.create({"email": "ama@campus.edu"})
        repo.create({"email": "kofi@campus.edu"})
        repo.create({"email": "ama@campus.edu"})

        assert [o["order_id"] for o in repo.find_by(email="ama@campus.edu")] == [1, 3]
        assert repo.find_one_by(email="nobody@campus.edu") is None
