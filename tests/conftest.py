import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.database import Base
from app.utils import deps as deps_utils
import main
from fastapi.testclient import TestClient
from app.core.config import settings
from app.core.constants import RoleEnum
from app.core.security import create_access_token
from app.crud.exam import exam as crud_exam
from app.crud.user import user as crud_user
from app.schemas.exam import ExamCreate
from tests.helpers.factories import exam_payload, user_data

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url.startswith("sqlite"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    # Nothing in a test commits, so the rollback leaves the database empty.
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    # Re-initialize the app for each test function to ensure a clean state
    from importlib import reload
    reload(main)
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client

@pytest.fixture(scope="function")
def committing_session_factory(database_engine, monkeypatch):
    """Sessions that really commit, served through the app's own dependencies.

    Committed rows outlive any rollback, so every table is emptied afterwards.
    """
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    monkeypatch.setattr(deps_utils, "SessionLocal", SessionLocal)
    yield SessionLocal
    with database_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())

@pytest.fixture(scope="function")
def committing_client(committing_session_factory):
    from importlib import reload
    reload(main)
    # Unhandled errors come back as the 500 response instead of being re-raised.
    with TestClient(main.app, raise_server_exceptions=False) as test_client:
        yield test_client

@pytest.fixture
def user_factory(db_session):
    def _user_factory(role: RoleEnum = RoleEnum.STUDENT, email: str = None, is_active: bool = True):
        return crud_user.create(db_session, obj_in=user_data(role, email=email, is_active=is_active))
    return _user_factory

@pytest.fixture
def token_for_user():
    def _token_for_user(user):
        return create_access_token({"user_id": user.id}, email=user.email)
    return _token_for_user

@pytest.fixture
def auth_headers(token_for_user):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {token_for_user(user)}"}
    return _auth_headers

@pytest.fixture
def admin_user(user_factory):
    return user_factory(RoleEnum.ADMIN)

@pytest.fixture
def student_user(user_factory):
    return user_factory(RoleEnum.STUDENT)

@pytest.fixture
def token_for_role(user_factory, token_for_user):
    """Issue a token for a fresh user with the given role name."""
    tokens = {}

    def _create_token_for_role(role_name: str):
        if role_name in tokens:
            return tokens[role_name]
        user = user_factory(getattr(RoleEnum, role_name.upper()))
        tokens[role_name] = token_for_user(user)
        return tokens[role_name]

    return _create_token_for_role

@pytest.fixture
def exam_factory(db_session, admin_user):
    def _exam_factory(**overrides):
        return crud_exam.create_with_questions(
            db_session, obj_in=ExamCreate(**exam_payload(**overrides)), created_by_id=admin_user.id
        )
    return _exam_factory
