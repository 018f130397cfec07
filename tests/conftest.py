import json

import pytest
from sqlalchemy import select

from db import init_db, get_session


@pytest.fixture
def db_url(tmp_path):
    """A fresh SQLite file per test."""
    return f"sqlite:///{tmp_path / 'test.sqlite'}"


@pytest.fixture
def database(db_url):
    """Initialise the schema on the per-test database."""
    init_db(db_url)
    return db_url


@pytest.fixture
def seed(database):
    """Insert records and commit them in their own session."""
    def _seed(*records):
        s = get_session()
        try:
            s.add_all(records)
            s.commit()
        finally:
            s.close()
    return _seed


@pytest.fixture
def stored(database):
    """Return the committed rows of a model as dicts, in key order."""
    def _stored(model):
        s = get_session()
        try:
            order = list(model.__mapper__.primary_key)
            return [r.to_dict() for r in s.scalars(select(model).order_by(*order))]
        finally:
            s.close()
    return _stored


@pytest.fixture
def app(db_url):
    from main import create_app
    app = create_app(db_url)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def payload():
    """Wrap rows in the export envelope the importer expects."""
    def _payload(*rows) -> str:
        return json.dumps([{"schema": {"elements": []}, "rows": list(rows)}])
    return _payload
