from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional, Union


class SummaryRequest(BaseModel):
    # Length rules live in app.services.validators so every violation
    # is reported with its own message.
    transcript: Optional[str] = ""
    prompt: Optional[str] = ""


class SummarySuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    text: str
    generation: int = 0


class SummaryFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    message: str
    generation: int = 0


SummaryResult = Union[SummarySuccess, SummaryFailure]


class SummarizeResponse(BaseModel):
    summary: Optional[str] = None
    error: Optional[str] = None
    generation: int
    superseded: bool = False
