import pytest

from app import create_app


@pytest.fixture
def app():
    """Fixture: application in testing mode"""
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()
