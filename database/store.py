"""
database/store.py

- grades 컬렉션에 대한 CRUD / 필터 조회 / 집계 파이프라인 어댑터
- 서비스 계층은 RecordStore 프로토콜에만 의존하고, pymongo 예외는 모두 StoreFailure로 변환한다
"""

import logging
from functools import wraps
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Protocol, Sequence

from pymongo.errors import PyMongoError

from utils.exceptions import StoreFailure

logger = logging.getLogger(__name__)


class UpdateCounts(NamedTuple):
    matched_count: int
    modified_count: int


class RecordStore(Protocol):
    def insert_one(self, document: Dict[str, Any]) -> str: ...

    def find_one(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]: ...

    def find(self, filter: Optional[Mapping[str, Any]] = None,
             projection: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]: ...

    def update_one(self, filter: Mapping[str, Any], update: Mapping[str, Any]) -> UpdateCounts: ...

    def update_many(self, filter: Mapping[str, Any], update: Mapping[str, Any]) -> UpdateCounts: ...

    def delete_one(self, filter: Mapping[str, Any]) -> int: ...

    def delete_many(self, filter: Mapping[str, Any]) -> int: ...

    def aggregate(self, pipeline: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]: ...


def _store_call(func):
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except PyMongoError as exc:
            logger.error("store operation %s failed: %s", func.__name__, exc)
            raise StoreFailure(str(exc)) from exc
    return wrapper


class MongoRecordStore:
    """pymongo Collection (또는 API 호환 컬렉션)을 감싸는 RecordStore 구현"""

    def __init__(self, collection):
        self.collection = collection

    @_store_call
    def insert_one(self, document):
        result = self.collection.insert_one(dict(document))
        return str(result.inserted_id)

    @_store_call
    def find_one(self, filter):
        return self.collection.find_one(filter)

    @_store_call
    def find(self, filter=None, projection=None):
        return list(self.collection.find(filter or {}, projection))

    @_store_call
    def update_one(self, filter, update):
        result = self.collection.update_one(filter, update)
        return UpdateCounts(result.matched_count, result.modified_count)

    @_store_call
    def update_many(self, filter, update):
        result = self.collection.update_many(filter, update)
        return UpdateCounts(result.matched_count, result.modified_count)

    @_store_call
    def delete_one(self, filter):
        return self.collection.delete_one(filter).deleted_count

    @_store_call
    def delete_many(self, filter):
        return self.collection.delete_many(filter).deleted_count

    @_store_call
    def aggregate(self, pipeline):
        return list(self.collection.aggregate(list(pipeline)))
