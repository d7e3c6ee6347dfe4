"""Test configuration and fixtures for the postdesk API."""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.pool import StaticPool

from postdesk import create_app
from postdesk.extensions import db, tokens
from postdesk.models import User, Post
from postdesk.utils.crypto import hash_password

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'SQLALCHEMY_ENGINE_OPTIONS': {
        'poolclass': StaticPool,
        'connect_args': {'check_same_thread': False}
    },
    'SECRET_KEY': 'test-secret-key',
    'JWT_SECRET': 'test-jwt-secret',
    'JWT_EXPIRE': '1h',
    'ENV': 'production',
    'RATELIMIT_ENABLED': False,  # Disable rate limiting for tests
    'CACHE_TYPE': 'NullCache',  # Fixtures write straight to the database
}


@pytest.fixture
def app_config() -> dict:
    """A copy of the test settings, for tests that build their own app."""
    return dict(TEST_CONFIG)


@pytest.fixture
def app() -> Generator[Flask, None, None]:
    """Create and configure a test Flask application."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        # Create all tables
        db.create_all()
        yield app

        # Cleanup
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def runner(app: Flask):
    """Create a test CLI runner."""
    return app.test_cli_runner()


def make_user(username: str, email: str, password: str = 'password123') -> User:
    # Low bcrypt cost keeps the suite fast
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password, rounds=4),
    )
    db.session.add(user)
    db.session.commit()
    db.session.refresh(user)
    return user


def make_post(author: User, title: str, **fields) -> Post:
    fields.setdefault('content', f'Content for {title}')
    fields.setdefault('slug', title.lower().replace(' ', '-'))
    post = Post(title=title, author_id=author.id, **fields)
    db.session.add(post)
    db.session.commit()
    db.session.refresh(post)
    return post


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {tokens.issue(user)}"}


@pytest.fixture
def user_factory(app: Flask):
    """Create extra accounts inside a test."""
    return make_user


@pytest.fixture
def post_factory(app: Flask):
    """Create posts directly in the database, bypassing the API."""
    return make_post


@pytest.fixture
def headers_for(app: Flask):
    """Build an Authorization header for any user."""
    return bearer


@pytest.fixture
def test_user(app: Flask) -> User:
    """The author of ``test_post``."""
    return make_user('testuser', 'test@example.com')


@pytest.fixture
def other_user(app: Flask) -> User:
    """A second account that owns nothing."""
    return make_user('anotheruser', 'another@example.com')


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return bearer(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return bearer(other_user)


@pytest.fixture
def test_post(test_user: User) -> Post:
    """Create a test blog post."""
    return make_post(
        test_user,
        'Test Post',
        content='This is a test post content',
        slug='test-post',
        category='0123456789abcdef0123456789abcdef',
    )


@pytest.fixture
def many_posts(test_user: User) -> list[Post]:
    """Fifteen posts with distinct, increasing creation times."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        make_post(
            test_user,
            f'Pagination Post {i}',
            slug=f'pagination-post-{i}',
            created_at=base + timedelta(minutes=i),
            category=f'cat-{i % 3}',
        )
        for i in range(15)
    ]
