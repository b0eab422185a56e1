# core/records.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.errors import RecordSchemaError

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="DomainRecord")


class DomainRecord(BaseModel):
    """
    Base for every backend record.

    The identifier arrives as "_id" and cannot be reassigned. Unknown fields
    are kept so a record can round-trip through an edit untouched.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True, validate_assignment=True)

    id: str = Field(alias="_id", frozen=True, min_length=1)


def as_record(record: Any) -> Dict[str, Any]:
    """Plain dict view of a record, keyed as the backend keys it."""
    if isinstance(record, BaseModel):
        return record.model_dump(by_alias=True)
    if isinstance(record, Mapping):
        return dict(record)
    raise TypeError(f"Not a record: {type(record).__name__}")


def record_id(record: Any) -> str:
    if isinstance(record, DomainRecord):
        return record.id
    data = as_record(record)
    return str(data.get("_id") or data.get("id") or "")


def parse_record(model: Type[R], payload: Any, resource: str = "") -> R:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RecordSchemaError(resource or model.__name__, str(e)) from e


def parse_records(model: Type[R], payload: Any, resource: str = "") -> Tuple[List[R], List[RecordSchemaError]]:
    """
    Validate a list payload. Records missing required fields are rejected and
    reported instead of being shown with holes in them.
    """
    name = resource or model.__name__
    if payload is None:
        return [], []
    if not isinstance(payload, list):
        raise RecordSchemaError(name, f"expected a list, got {type(payload).__name__}")
    good: List[R] = []
    bad: List[RecordSchemaError] = []
    for idx, item in enumerate(payload):
        try:
            good.append(parse_record(model, item, name))
        except RecordSchemaError as e:
            logger.warning("Rejected %s record #%d: %s", name, idx, e.detail)
            bad.append(e)
    return good, bad


def index_by_id(records: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
    return {record_id(r): as_record(r) for r in records}
