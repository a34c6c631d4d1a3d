"""Tests for engine and session helpers."""

import pytest
from sqlalchemy.orm import sessionmaker

from comply.database import build_engine, session_scope
from comply.models.user import User


def _user(email):
    return User(
        email=email,
        password_hash="not-a-real-hash",
        first_name="Seed",
        last_name="User",
    )


def test_build_engine_for_sqlite(tmp_path):
    """Test that a SQLite URL gets a working engine without a server pool."""
    engine = build_engine(f"sqlite:///{tmp_path / 'x.db'}")
    with engine.connect() as connection:
        assert connection.exec_driver_sql("select 1").scalar() == 1
    assert engine.dialect.name == "sqlite"


@pytest.fixture
def session_factory(db):
    return sessionmaker(autocommit=False, autoflush=False, bind=db.get_bind())


def test_session_scope_commits(db, session_factory):
    """Test that a clean exit commits the work."""
    with session_scope(session_factory) as session:
        session.add(_user("scoped@example.com"))

    assert db.query(User).filter(User.email == "scoped@example.com").count() == 1


def test_session_scope_rolls_back_on_error(db, session_factory):
    """Test that an error discards the work and propagates."""
    with pytest.raises(RuntimeError):
        with session_scope(session_factory) as session:
            session.add(_user("rolled-back@example.com"))
            session.flush()
            raise RuntimeError("boom")

    assert db.query(User).filter(User.email == "rolled-back@example.com").count() == 0
