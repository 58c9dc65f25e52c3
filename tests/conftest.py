# tests/conftest.py

import mongomock
import pytest
from fastapi.testclient import TestClient

from database.store import MongoRecordStore
from main import create_app
from services.grade_aggregation import GradeAggregation
from services.grade_commands import GradeCommands


@pytest.fixture
def collection():
    return mongomock.MongoClient()["sample_training"]["grades"]


@pytest.fixture
def store(collection):
    return MongoRecordStore(collection)


@pytest.fixture
def commands(store):
    return GradeCommands(store)


@pytest.fixture
def aggregation(store):
    return GradeAggregation(store, threshold=70)


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))


@pytest.fixture
def sample_payload():
    return {
        "learner_id": 7,
        "class_id": 101,
        "scores": [
            {"type": "exam", "score": 80},
            {"type": "quiz", "score": 70},
        ],
    }


@pytest.fixture
def seed(collection):
    """문서를 직접 넣고 ObjectId 문자열 목록을 돌려준다"""
    def _seed(*docs):
        return [str(collection.insert_one(dict(doc)).inserted_id) for doc in docs]
    return _seed
