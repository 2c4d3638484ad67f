"""Document request/response schemas - the person record stored in the products index."""

import json
import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class BulkDecodeError(ValueError):
    """Raised when a bulk body is not a clean stream of JSON documents."""


class Document(BaseModel):
    """One person. born_date is stored under the date-typed "ttl" field; no expiry applies."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: str = ""
    last_name: str = ""
    born_date: str = Field("", alias="ttl")

    @field_validator("first_name", "last_name", "born_date", mode="before")
    @classmethod
    def _scalar_to_str(cls, v: Any) -> Any:
        # null and epoch-millis dates come back from the engine as non-strings
        if v is None:
            return ""
        if isinstance(v, (int, float, bool)):
            return str(v)
        return v

    def to_source(self) -> dict[str, str]:
        """Engine-side representation, keyed by the stored field names."""
        return self.model_dump(by_alias=True)

    def fill_blanks(self, stored: "Document") -> "Document":
        """Return a copy where every empty field takes the stored value."""
        return Document(
            first_name=self.first_name or stored.first_name,
            last_name=self.last_name or stored.last_name,
            born_date=self.born_date or stored.born_date,
        )


def parse_document(raw: bytes | str) -> Document:
    """Lenient decode for create/update: anything malformed becomes an empty document."""
    try:
        return Document.model_validate_json(raw)
    except ValidationError:
        return Document()


def iter_documents(raw: bytes | str) -> Iterator[Document]:
    """
    Decode a stream of concatenated JSON documents (newline or whitespace separated).
    Raises BulkDecodeError on the first value that is not a valid document.
    A null value decodes to an empty document.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    except UnicodeDecodeError as e:
        raise BulkDecodeError(str(e)) from e
    decoder = json.JSONDecoder()
    pos = 0
    while True:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos >= len(text):
            return
        try:
            value, pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise BulkDecodeError(f"invalid JSON at offset {e.pos}: {e.msg}") from e
        yield _validate(value)


def _validate(value: Any) -> Document:
    if value is None:
        return Document()
    try:
        return Document.model_validate(value)
    except ValidationError as e:
        raise BulkDecodeError(str(e)) from e


def document_from_source(source: dict[str, Any] | None) -> Document:
    """Decode a stored _source; a value that cannot be read as a string leaves all fields empty."""
    try:
        return Document.model_validate(source or {})
    except ValidationError as e:
        logger.warning("stored document could not be decoded: %s", e)
        return Document()
