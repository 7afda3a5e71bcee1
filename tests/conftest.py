"""
Test configuration and fixtures for vaev tests.

Every test gets its own app bound to a fresh in-memory SQLite database.
"""
import pytest

from vaev.config import Settings
from vaev.db.init_db import init_database
from vaev.db.repositories import ProjectRepository, TypeRepository, UserRepository
from vaev.main import create_app
from vaev.services.identity_provider import hash_password

from tests.helpers import FAST_HASHER, PASSWORD, SESSION_KEY, GraphClient


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        SESSION_KEY=SESSION_KEY,
        DATABASE_URL="sqlite://",
        APP_ENV="production",
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    init_database(application.state.engine)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def client(app):
    """Client with a session cookie holding CSRF_TOKEN, not signed in."""
    test_client = GraphClient(app)
    test_client.use_session()
    return test_client


@pytest.fixture
def make_user(db):
    def _make_user(email: str, name: str = "", password: str = PASSWORD):
        return UserRepository(db).create_user(email, hash_password(password, FAST_HASHER), name=name)

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("ada@example.com", name="Ada")


@pytest.fixture
def other_user(make_user):
    return make_user("grace@example.com", name="Grace")


@pytest.fixture
def auth_client(client, user):
    client.sign_in(user)
    return client


@pytest.fixture
def project(db, user):
    """A project owned by ``user`` with one node type and one edge type."""
    project = ProjectRepository(db).create_project(owner=user.id, name="Atlas")
    types = TypeRepository(db)
    types.create_node_type(project.id, name="Atlas - Person", fill_color="#fff", stroke_color="#000",
                           stroke_width=2, shape=0)
    types.create_edge_type(project.id, name="Atlas - Knows", stroke_color="#000", stroke_width=1,
                           line_dash=b"\x04\x02")
    return project


@pytest.fixture
def node_type(db, project):
    return TypeRepository(db).get_project_node_types(project.id)[0]


@pytest.fixture
def edge_type(db, project):
    return TypeRepository(db).get_project_edge_types(project.id)[0]
