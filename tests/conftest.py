"""Module to setup the blog, authors and other required artifacts for tests

    isort:skip_file
"""

import os
from datetime import datetime, timedelta, timezone

import pytest


SUPPORT_DIR = os.path.join(os.path.abspath(os.path.dirname(__file__)), "support")


class User:
    """An author record owned by the host application"""

    def __init__(self, id, username, twitter_username=None):
        self.id = id
        self.username = username
        if twitter_username is not None:
            self.twitter_username = twitter_username

    def full_name(self):
        return f"{self.username.title()} Writer"


class Admin:
    """An author type without a `username`"""

    def __init__(self, id, email):
        self.id = id
        self.email = email


def pytest_addoption(parser):
    """Additional options for running tests with pytest"""
    parser.addoption(
        "--slow", action="store_true", default=False, help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    """Configure special markers on tests, so as to control execution"""
    if config.getoption("--slow"):
        return

    skip_slow = pytest.mark.skip(reason="need --slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Tests never see environment sections or log levels from the outside"""
    monkeypatch.delenv("BLOGIT_ENV", raising=False)
    monkeypatch.delenv("BLOGIT_LOG_LEVEL", raising=False)


@pytest.fixture
def support_dir():
    return SUPPORT_DIR


@pytest.fixture
def users():
    return {
        1: User(1, "john", twitter_username="johnwrites"),
        2: User(2, "jane"),
    }


@pytest.fixture
def admins():
    return {10: Admin(10, "admin@example.com")}


@pytest.fixture
def blog_config():
    """Override in a test module or class to build the blog differently"""
    return {}


@pytest.fixture
def blog(blog_config, users, admins):
    from blogit import Blog

    blog = Blog("Test", config=blog_config)
    blog.register_author_type(User, users.get)
    blog.register_author_type(Admin, admins.get)

    yield blog

    blog.reset()


@pytest.fixture
def build_post(blog, users):
    """Build (but do not save) a valid post, with any attribute overridden"""
    from blogit import Post

    def _build(**kwargs):
        values = {
            "title": "A post about testing",
            "body": "This is the body of the post",
            "description": "A short description",
            "state": "published",
            "author": users[1],
        }
        # An explicit author reference replaces the default author
        if "author_id" in kwargs:
            values.pop("author")

        values.update(kwargs)
        return Post(blog=blog, **values)

    return _build


@pytest.fixture
def create_post(blog, build_post):
    """Build and save a valid post"""

    def _create(**kwargs):
        return blog.posts.add(build_post(**kwargs))

    return _create


@pytest.fixture
def timestamps():
    """Distinct, increasing creation timestamps"""
    base = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    return [base + timedelta(hours=hour) for hour in range(10)]
