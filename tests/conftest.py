"""Pytest configuration and shared fixtures."""
import os

# Settings are read on import, so the test environment is fixed first
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ADMIN_EMAILS", '["admin@campus.edu"]')
os.environ.setdefault("STORE_KEY_PREFIX", "test:")

import fakeredis
import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient

from campus_suite.core.auth import create_access_token
from campus_suite.domain.user import User, UserRole
from campus_suite.infrastructure.email import EmailReceipt, EmailSender
from campus_suite.infrastructure.redis import RedisDocumentStore


@pytest.fixture
def fake_server():
    """In-process Redis server shared by every client of one test."""
    return fakeredis.FakeServer()


@pytest.fixture
def redis_client(fake_server):
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def store(redis_client):
    """Document store backed by fakeredis."""
    return RedisDocumentStore(redis_client=redis_client, key_prefix="test:")


@pytest.fixture
def mock_email_sender():
    """Email collaborator that records sends instead of talking SMTP."""
    sender = Mock(spec=EmailSender)
    sender.send.side_effect = lambda to, subject, text: EmailReceipt(
        recipient=to, subject=subject, message_id="<test@campus>"
    )
    return sender


@pytest.fixture
def admin_user():
    return User(user_id=1, email="admin@campus.edu", name="Campus Admin", role=UserRole.ADMIN)


@pytest.fixture
def student_user():
    return User(user_id=2, email="ama@campus.edu", name="Ama Mensah", role=UserRole.USER)


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(admin_user)}"}


@pytest.fixture
def user_headers(student_user):
    return {"Authorization": f"Bearer {create_access_token(student_user)}"}


@pytest.fixture
def test_client(store, mock_email_sender):
    """FastAPI test client wired to the fakeredis store and the mock sender."""
    from main import app
    from campus_suite.api.deps import get_email_sender, get_store

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_email_sender] = lambda: mock_email_sender
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def loan_application_payload():
    return {
        "full_name": "Ama Mensah",
        "dob": "2002-04-17",
        "gender": "Female",
        "phone": "+233201234567",
        "email": "ama@campus.edu",
        "home_address": "Hall 3, Room 12",
        "program": "Computer Science",
        "year_of_study": "2",
        "loan_title": "Laptop Loan",
        "amount": 1500,
        "purpose": "Study laptop",
        "confirm_accurate": True,
        "agree_terms": True,
        "understand_risk": True,
    }


@pytest.fixture
def user_order_payload():
    return {
        "items": [
            {"product_name": "Campus Hoodie", "product_image": "https://img/hoodie.png", "quantity": 2, "price": 25.0},
            {"product_name": "Notebook", "product_image": "https://img/notebook.png", "quantity": 1, "price": 5.0},
        ],
        "subtotal": 55.0,
        "total_amount": 55.0,
        "name": "Ama Mensah",
        "email": "ama@campus.edu",
        "phone_number": "+233201234567",
        "address": "Hall 3, Room 12",
        "payment_document_url": "https://img/proof.png",
    }
