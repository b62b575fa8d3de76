"""Shared fixtures for csvdb tests."""

import pytest

from csvdb import CsvStore, define_schema


@pytest.fixture
def person_tags():
    """Tag mapping for a simple person record."""
    return {"name": "string", "age": "number", "email": "string"}


@pytest.fixture
def person_schema(person_tags):
    """Compiled person schema."""
    return define_schema(person_tags)


@pytest.fixture
def dummy_data():
    """Four valid person records."""
    return [
        {"name": "John Doe", "age": 25, "email": "johndoe@example.com"},
        {"name": "Jane Smith", "age": 30, "email": "janesmith@example.com"},
        {"name": "Anita Ledner", "age": 47, "email": "Cornell.Watsica@hotmail.com"},
        {"name": "Lance Langworth", "age": 42, "email": "Neal.Goyette@yahoo.com"},
    ]


@pytest.fixture
def store(tmp_path, person_tags):
    """Empty store with the person schema; its file does not exist yet."""
    return CsvStore(tmp_path, "test.csv", schema=person_tags)


@pytest.fixture
def populated_store(store, dummy_data):
    """Store holding the dummy records."""
    store.insert_many(dummy_data)
    return store


@pytest.fixture
def pair_store(tmp_path):
    """Store with schema {name: string, age: number} holding A/1 and B/2."""
    db = CsvStore(tmp_path, "pair.csv", schema={"name": "string", "age": "number"})
    db.insert_many([{"name": "A", "age": 1}, {"name": "B", "age": 2}])
    return db
