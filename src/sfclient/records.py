"""Record descriptions and the JSON codec used by :class:`SalesforceClient`.

Record types are plain dataclasses. Field order in the class body is the order
used for SOQL projections. Per-field wire behaviour is declared with
:func:`sf_field`::

    @dataclass
    class Contact:
        Id: Optional[str] = sf_field(default=None, create=False, update=False)
        LastName: Optional[str] = None
        phone: Optional[str] = sf_field(default=None, name="Phone")

Plain ``dict`` records are passed through unchanged.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import typing
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from .exceptions import InvalidArgumentError
from .json_value import JsonValue

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_METADATA_KEY = "sfclient"


@dataclass(frozen=True)
class FieldSpec:
    """How one record attribute maps onto the wire."""

    attr_name: str
    wire_name: str
    include_on_create: bool = True
    include_on_update: bool = True


def sf_field(
    *,
    name: Optional[str] = None,
    create: bool = True,
    update: bool = True,
    **kwargs: Any,
) -> Any:
    """dataclasses.field() carrying Salesforce wire metadata.

    ``name`` overrides the API field name; ``create``/``update`` control whether
    the attribute is sent in create (POST) and update (PATCH) bodies.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[_METADATA_KEY] = {"name": name, "create": create, "update": update}
    return field(metadata=metadata, **kwargs)


def record_fields(record_type: type) -> List[FieldSpec]:
    """Return the field table for a dataclass record type, in declaration order."""
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise InvalidArgumentError(
            "record_type", f"must be a dataclass, got {getattr(record_type, '__name__', record_type)!r}"
        )
    specs = []
    for f in dataclasses.fields(record_type):
        meta = f.metadata.get(_METADATA_KEY, {})
        specs.append(
            FieldSpec(
                attr_name=f.name,
                wire_name=meta.get("name") or f.name,
                include_on_create=meta.get("create", True),
                include_on_update=meta.get("update", True),
            )
        )
    return specs


def record_projection(record_type: type, fields: Optional[Sequence[str]] = None) -> str:
    """Comma separated field list for ``SELECT <fields> FROM ...``.

    Duplicates in ``fields`` are kept as given.
    """
    names = list(fields) if fields is not None else [s.wire_name for s in record_fields(record_type)]
    if not names:
        raise InvalidArgumentError("fields")
    return ", ".join(names)


@dataclass
class QueryResult(Generic[T]):
    records: List[T]
    total_size: int = 0
    done: bool = True
    next_records_url: Optional[str] = None


class RecordCodec:
    """Serialize records to JSON bodies and decode responses into record types."""

    def __init__(self, *, include_none: bool = False) -> None:
        # None-valued attributes are left out of request bodies unless asked for.
        self.include_none = include_none

    # --------------------------- Serialization ------------------------

    def to_wire(self, record: Any, *, for_update: bool = False) -> Dict[str, Any]:
        if isinstance(record, dict):
            return dict(record)
        out: Dict[str, Any] = {}
        for spec in record_fields(type(record)):
            if for_update and not spec.include_on_update:
                continue
            if not for_update and not spec.include_on_create:
                continue
            value = getattr(record, spec.attr_name)
            if value is None and not self.include_none:
                continue
            if dataclasses.is_dataclass(value) and not isinstance(value, type):
                value = self.to_wire(value, for_update=for_update)
            out[spec.wire_name] = value
        return out

    def serialize(self, record: Any, *, for_update: bool = False) -> str:
        return json.dumps(self.to_wire(record, for_update=for_update), default=str)

    # --------------------------- Deserialization ----------------------

    def deserialize_untyped(self, content: Any) -> JsonValue:
        return JsonValue.parse(content)

    def from_wire(self, data: Any, record_type: Type[T]) -> T:
        if data is None or record_type is dict or record_type is Any:
            return data
        if not isinstance(data, dict):
            return data
        try:
            hints = typing.get_type_hints(record_type)
        except NameError:
            # Annotations referring to names local to a function cannot be resolved.
            hints = {}
        kwargs = {}
        for spec in record_fields(record_type):
            if spec.wire_name not in data:
                continue
            value = data[spec.wire_name]
            nested = _dataclass_of(hints.get(spec.attr_name))
            if nested is not None and isinstance(value, dict):
                value = self.from_wire(value, nested)
            kwargs[spec.attr_name] = value
        return record_type(**kwargs)

    def deserialize(self, content: Any, record_type: Type[T]) -> T:
        data = json.loads(content) if isinstance(content, (str, bytes)) else content
        return self.from_wire(data, record_type)

    def deserialize_query(self, content: Any, record_type: Type[T]) -> QueryResult[T]:
        value = JsonValue.parse(content) if isinstance(content, (str, bytes)) else JsonValue(content)
        data = value.as_dict()
        records_value = value.get("records")
        raw_records = records_value.as_list() if records_value is not None else []
        records = [self.from_wire(r.raw, record_type) for r in raw_records]
        _logger.debug("Decoded %d %s record(s)", len(records), getattr(record_type, "__name__", record_type))
        return QueryResult(
            records=records,
            total_size=data.get("totalSize", len(records)),
            done=data.get("done", True),
            next_records_url=data.get("nextRecordsUrl"),
        )


def _dataclass_of(hint: Any) -> Optional[type]:
    """Return the dataclass inside ``X`` or ``Optional[X]``, else None."""
    if hint is None:
        return None
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return hint
    for arg in typing.get_args(hint):
        if isinstance(arg, type) and dataclasses.is_dataclass(arg):
            return arg
    return None
