from pydantic import BaseModel, Field
from typing import List


class PollOption(BaseModel):
    text: str
    votes: int = Field(0, ge=0)


class Poll(BaseModel):
    id: str
    question: str
    options: List[PollOption]

    def snapshot(self) -> dict:
        """Wire form of the poll as viewers see it (no id)."""
        return self.model_dump(exclude={"id"})
