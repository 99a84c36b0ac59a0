import pytest
from fastapi.testclient import TestClient

from bookstore.db import Base, make_engine, make_session_factory
from bookstore.main import create_app

POWER_UP = {
    "isbn": "0691161518",
    "amazon_url": "http://a.co/eobPtX2",
    "author": "Matthew Lane",
    "language": "english",
    "pages": 264,
    "publisher": "Princeton University Press",
    "title": "Power-Up: Unlocking the Hidden Mathematics in Video Games",
    "year": 2017,
}


@pytest.fixture
def book():
    return dict(POWER_UP)


@pytest.fixture
def client():
    # fresh in-memory store per test; the with-block runs startup/shutdown
    with TestClient(create_app("sqlite://")) as test_client:
        yield test_client


@pytest.fixture
def seeded(client, book):
    response = client.post("/books", json=book)
    assert response.status_code == 201
    return client


@pytest.fixture
def session():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    db = make_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
