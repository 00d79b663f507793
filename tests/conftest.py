import pytest

from page_analyzer import create_app
from page_analyzer.database import Database

IN_MEMORY = "sqlite://"


@pytest.fixture()
def db():
    database = Database(IN_MEMORY)
    database.init_schema()
    yield database
    database.dispose()


@pytest.fixture()
def app(db):
    return create_app({"database_url": IN_MEMORY}, db=db)


@pytest.fixture()
def client(app):
    return app.test_client()
