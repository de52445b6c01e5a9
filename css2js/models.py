from __future__ import annotations

from pydantic import BaseModel


class ErrorEnvelope(BaseModel):
    code: str
    message: str
    request_id: str | None = None


class ConvertOptions(BaseModel):
    split_on_newline: bool = True
    trim_spaces_before_newline: bool = True
    trim_trailing_newline: bool = True
    prefix: str | None = None
    suffix: str | None = None
