from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

MAX_NAMES_PER_REQUEST = 50
MAX_WRITE_BYTES = 1_000_000

CONTENT_ENCODING_ERROR = "content_encoding"
CONTENT_TOO_LARGE_ERROR = "content_too_large"


class ReadRequest(BaseModel):
    filenames: List[str] = Field(..., max_length=MAX_NAMES_PER_REQUEST)


class WriteRequest(BaseModel):
    file_path: str
    content: str

    @field_validator("content")
    @classmethod
    def content_within_limit(cls, v: str) -> str:
        # lone surrogates survive JSON decoding but cannot be stored as UTF-8
        try:
            size = len(v.encode("utf-8"))
        except UnicodeEncodeError:
            raise PydanticCustomError(CONTENT_ENCODING_ERROR, "content is not valid UTF-8 text") from None
        if size > MAX_WRITE_BYTES:
            raise PydanticCustomError(
                CONTENT_TOO_LARGE_ERROR,
                "content exceeds the maximum size of {limit} bytes",
                {"limit": MAX_WRITE_BYTES},
            )
        return v
