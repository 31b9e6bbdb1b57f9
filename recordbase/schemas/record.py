"""Record schema — the typed document stored under a key.

A Record is an immutable snapshot: a key, a type discriminator and a
flat mapping of field names to scalar Values. Mutation happens only by
saving a whole new Record under the same key, or by deleting it.

Persisted form is a compact JSON object whose first member is the
reserved "_type" discriminator, so stored documents can be selected by
a plain text scan before they are parsed:

    {"_type":"note","_key":"r1","title":"a"}
"""

import json
import math
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from recordbase.exceptions import RecordDecodeError
from recordbase.schemas.enums import ValueKind

TYPE_FIELD = "_type"
KEY_FIELD = "_key"
RESERVED_FIELDS = frozenset({TYPE_FIELD, KEY_FIELD})

Value = Optional[Union[StrictBool, StrictInt, StrictFloat, StrictStr]]


class Record(BaseModel):
    """A typed document identified by its key within one Database."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Unique key within a Database")
    type: str = Field(..., min_length=1, description="Type discriminator")
    fields: dict[str, Value] = Field(default_factory=dict, description="Named scalar values")

    @field_validator("fields")
    @classmethod
    def reject_reserved_and_non_finite(cls, v: dict[str, Any]) -> dict[str, Any]:
        """Reserved names are owned by the document envelope; NaN/inf have no JSON form."""
        for name, value in v.items():
            if name in RESERVED_FIELDS:
                raise ValueError(f"Field name {name} is reserved")
            if isinstance(value, float) and not math.isfinite(value):
                raise ValueError(f"Field {name} must be finite, got: {value}")
        return v

    def get(self, field_path: str) -> Any:
        """Return the value at field_path, or None when it is unknown."""
        return get_value(self, field_path)

    def to_document(self) -> str:
        """Serialize to the persisted JSON document."""
        doc: dict[str, Any] = {TYPE_FIELD: self.type, KEY_FIELD: self.key}
        doc.update(self.fields)
        return json.dumps(doc, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_document(cls, raw: str | bytes, key: str | None = None) -> "Record":
        """Parse a persisted JSON document.

        Args:
            raw: Document text.
            key: Storage key the document was read from. Used when the
                 document carries no "_key" member.

        Raises:
            RecordDecodeError: If the text is not a valid record document.
        """
        try:
            doc = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise RecordDecodeError(f"Malformed record document: {exc}", key) from exc

        if not isinstance(doc, dict):
            raise RecordDecodeError("Record document must be a JSON object", key)

        record_type = doc.pop(TYPE_FIELD, None)
        record_key = doc.pop(KEY_FIELD, key)
        try:
            return cls(key=record_key, type=record_type, fields=doc)
        except ValidationError as exc:
            raise RecordDecodeError(f"Invalid record document: {exc}", key) from exc


def get_value(record: Record, field_path: str) -> Any:
    """Look up a field Value by path; unknown paths give None."""
    return record.fields.get(field_path)


def value_kind(value: Any) -> ValueKind:
    """Classify a Value into its variant tag.

    bool is checked before int because bool is an int subclass.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def type_marker(record_type: str) -> str:
    """Text that prefixes every persisted document of record_type."""
    return "{" + json.dumps(TYPE_FIELD) + ":" + json.dumps(record_type, ensure_ascii=False)
