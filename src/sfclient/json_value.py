"""Tagged JSON value tree used to inspect untyped API payloads.

Error bodies and the small ``{"id": ..., "success": ...}`` documents returned by
create calls are read through :class:`JsonValue` instead of raw dicts, so a
payload with an unexpected shape fails with a :class:`JsonShapeError` naming
the path that did not match.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional, Union

from .exceptions import JsonShapeError

NULL = "null"
BOOL = "bool"
NUMBER = "number"
STRING = "string"
ARRAY = "array"
OBJECT = "object"


def _kind_of(raw: Any) -> str:
    if raw is None:
        return NULL
    if isinstance(raw, bool):
        return BOOL
    if isinstance(raw, (int, float)):
        return NUMBER
    if isinstance(raw, str):
        return STRING
    if isinstance(raw, list):
        return ARRAY
    if isinstance(raw, dict):
        return OBJECT
    raise JsonShapeError(f"Unsupported JSON value of type {type(raw).__name__}")


class JsonValue:
    """A JSON value tagged with its kind."""

    __slots__ = ("kind", "raw", "path")

    def __init__(self, raw: Any, path: str = "$"):
        self.kind = _kind_of(raw)
        self.raw = raw
        self.path = path

    @classmethod
    def parse(cls, content: Union[str, bytes, None]) -> JsonValue:
        """Parse JSON text; empty content yields a null value."""
        if content is None or not content.strip():
            return cls(None)
        try:
            return cls(json.loads(content))
        except ValueError as e:
            raise JsonShapeError(f"Response body is not valid JSON: {e}") from e

    def __repr__(self) -> str:
        return f"JsonValue({self.kind}, {self.path})"

    def _expect(self, kind: str) -> None:
        if self.kind != kind:
            raise JsonShapeError(f"Expected {kind} at {self.path}, found {self.kind}")

    # --------------------------- Predicates ---------------------------

    @property
    def is_null(self) -> bool:
        return self.kind == NULL

    @property
    def is_array(self) -> bool:
        return self.kind == ARRAY

    @property
    def is_object(self) -> bool:
        return self.kind == OBJECT

    # --------------------------- Accessors ----------------------------

    def __getitem__(self, key: Union[int, str]) -> JsonValue:
        if isinstance(key, int):
            self._expect(ARRAY)
            try:
                return JsonValue(self.raw[key], f"{self.path}[{key}]")
            except IndexError:
                raise JsonShapeError(f"Index {key} out of range at {self.path}") from None
        self._expect(OBJECT)
        if key not in self.raw:
            raise JsonShapeError(f"Missing field '{key}' at {self.path}")
        return JsonValue(self.raw[key], f"{self.path}.{key}")

    def get(self, key: str) -> Optional[JsonValue]:
        """Return the named member, or None when absent."""
        self._expect(OBJECT)
        if key not in self.raw:
            return None
        return JsonValue(self.raw[key], f"{self.path}.{key}")

    def __len__(self) -> int:
        if self.kind not in (ARRAY, OBJECT):
            raise JsonShapeError(f"Expected array or object at {self.path}, found {self.kind}")
        return len(self.raw)

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(self.as_list())

    def as_list(self) -> List[JsonValue]:
        self._expect(ARRAY)
        return [JsonValue(v, f"{self.path}[{i}]") for i, v in enumerate(self.raw)]

    def as_dict(self) -> Dict[str, Any]:
        self._expect(OBJECT)
        return dict(self.raw)

    def as_str(self) -> str:
        self._expect(STRING)
        return self.raw

    def as_bool(self) -> bool:
        self._expect(BOOL)
        return self.raw

    def as_number(self) -> Union[int, float]:
        self._expect(NUMBER)
        return self.raw

    def to_text(self) -> str:
        """Coerce a scalar to its string form (null becomes an empty string)."""
        if self.kind == STRING:
            return self.raw
        if self.kind == NULL:
            return ""
        if self.kind == BOOL:
            return "true" if self.raw else "false"
        if self.kind == NUMBER:
            return str(self.raw)
        return json.dumps(self.raw)
