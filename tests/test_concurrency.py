"""Concurrent creation must still yield unique, dense identifiers."""
import threading
from concurrent.futures import ThreadPoolExecutor

import fakeredis

from campus_suite.core.errors import ValidationFailed
from campus_suite.domain.user import SignupRequest
from campus_suite.infrastructure.redis import RedisDocumentStore
from campus_suite.services.entities import EntityRepository
from campus_suite.services.users import UserService


def _create_many(fake_server, collection, count, workers=16):
    def create(i):
        # One client per call, all on the same server
        client = fakeredis.FakeRedis(server=fake_server, decode_responses=True)
        repo = EntityRepository(RedisDocumentStore(redis_client=client, key_prefix="test:"), collection)
        return repo.create({"name": f"Item {i}"})[repo.id_field]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(create, range(count)))


class TestConcurrentAllocation:
    """Test allocation under a thread pool."""

    def test_concurrent_creates_are_dense_and_unique(self, fake_server):
        ids = _create_many(fake_server, "products", 50)

        assert sorted(ids) == list(range(1, 51))

    def test_concurrent_creates_fill_gaps_first(self, fake_server, store):
        repo = EntityRepository(store, "loans")
        for i in range(6):
            repo.create({"title": f"Loan {i}"})
        repo.delete(2)
        repo.delete(5)

        ids = _create_many(fake_server, "loans", 10, workers=8)

        assert sorted(ids) == [2, 5] + list(range(7, 15))
        assert store.list_identifiers("loans") == list(range(1, 15))

    def test_every_document_is_stored_under_its_identifier(self, fake_server, store):
        _create_many(fake_server, "notifications", 20)

        documents = store.find_all("notifications")
        assert [d["notification_id"] for d in documents] == list(range(1, 21))


class TestConcurrentSignup:
    """Test email uniqueness when the same address signs up at once."""

    def test_only_one_account_per_email(self, fake_server, store):
        workers = 8
        barrier = threading.Barrier(workers)

        def signup(i):
            client = fakeredis.FakeRedis(server=fake_server, decode_responses=True)
            service = UserService(RedisDocumentStore(redis_client=client, key_prefix="test:"))
            barrier.wait()
            try:
                return service.signup(SignupRequest(name=f"Ama {i}", email="ama@campus.edu", password="pw")).user_id
            except ValidationFailed:
                return None

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(signup, range(workers)))

        created = [user_id for user_id in results if user_id is not None]
        assert len(created) == 1
        accounts = [u for u in store.find_all("users") if u["email"] == "ama@campus.edu"]
        assert [u["user_id"] for u in accounts] == created

    def test_distinct_emails_all_register(self, fake_server):
        def signup(i):
            client = fakeredis.FakeRedis(server=fake_server, decode_responses=True)
            service = UserService(RedisDocumentStore(redis_client=client, key_prefix="test:"))
            return service.signup(SignupRequest(name="Student", email=f"s{i}@campus.edu", password="pw")).user_id

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(signup, range(12)))

        assert sorted(ids) == list(range(1, 13))
