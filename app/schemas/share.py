from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


class EmailRequest(BaseModel):
    recipient: str
    body: str


class ShareRequest(BaseModel):
    recipient: Optional[str] = ""
    summary: Optional[str] = ""


class EmailSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    generation: int = 0


class EmailFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    message: str
    generation: int = 0


EmailResult = Union[EmailSuccess, EmailFailure]


class ShareResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    generation: int
    superseded: bool = False
