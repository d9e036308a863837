# src/provstore/contracts/entries.py
"""Report entry contract.

TRUST BOUNDARY: report entries are "Their Data" - produced by remote workers
and shipped through a transport this package does not own. The model is
permissive about extra attributes (ignored) and scalar value types (coerced
to str), strict about the fields every entry must carry.

Wire shape (one JSON object per entry):

    {"timestamp": 1418043150000, "runId": "8c5d...", "taskId": 1,
     "taskname": "align", "lang": "bash", "invocId": 100,
     "file": "reads.fq", "key": "file-size-stagein", "value": "2048"}

``value`` is either a scalar (the raw value) or a JSON object (the
structured value). Scalars that arrive as JSON numbers are kept as their
text so raw-value parsing stays uniform.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from provstore.contracts.enums import EntryKey
from provstore.contracts.errors import ValueFormatError


class ReportEntry(BaseModel):
    """One timestamped key/value observation emitted during workflow execution."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    timestamp: int = Field(description="Emission time in epoch milliseconds")
    run_id: UUID = Field(alias="runId", description="Globally unique run identifier")
    task_id: int | None = Field(default=None, alias="taskId")
    task_name: str | None = Field(default=None, alias="taskname")
    lang: str | None = Field(default=None)
    invoc_id: int | None = Field(default=None, alias="invocId")
    file_name: str | None = Field(default=None, alias="file")
    key: str = Field(min_length=1)
    value: str | dict[str, Any]

    @field_validator("value", mode="before")
    @classmethod
    def coerce_scalar_value(cls, v: Any) -> Any:
        """Keep JSON numbers/booleans as their text; objects stay structured."""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, int | float):
            return json.dumps(v)
        return v

    @property
    def entry_key(self) -> EntryKey | None:
        """Recognized key, or None when the key is outside the vocabulary."""
        return EntryKey.lookup(self.key)

    def raw_value(self) -> str:
        """Value as a raw string (structured values are re-serialized)."""
        if isinstance(self.value, str):
            return self.value
        return json.dumps(self.value, separators=(",", ":"), sort_keys=True)

    def structured_value(self) -> dict[str, Any]:
        """Value as a JSON object.

        String values are parsed as JSON text.

        Raises:
            ValueFormatError: If the value is not (or does not parse to) an object
        """
        if isinstance(self.value, dict):
            return self.value
        try:
            decoded = json.loads(self.value)
        except json.JSONDecodeError as e:
            raise ValueFormatError(f"value is not a JSON object: {e.msg}") from e
        match decoded:
            case dict() as obj:
                return obj
            case _:
                raise ValueFormatError(f"value is not a JSON object, got {type(decoded).__name__}")

    def scalar_value(self) -> str:
        """Value as a scalar string.

        Raises:
            ValueFormatError: If the value is structured
        """
        if isinstance(self.value, dict):
            raise ValueFormatError("expected a scalar value, got a JSON object")
        return self.value

    def to_wire(self) -> dict[str, Any]:
        """Serialize back to the wire shape (aliases, None fields dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
