from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr
from typing import Any, List, Optional, Union


class PollCreate(BaseModel):
    question: str
    options: List[Optional[str]]


class PollOptionOut(BaseModel):
    text: str
    votes: int


class PollOut(BaseModel):
    question: str
    options: List[PollOptionOut]


class PollCreated(PollOut):
    id: str


class ErrorOut(BaseModel):
    error: str


class ClientMessage(BaseModel):
    event: StrictStr
    data: Any = None


class VoteMessage(BaseModel):
    pollId: StrictStr
    optionIndex: Union[StrictInt, StrictFloat]
