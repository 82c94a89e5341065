from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Position(str, Enum):
    MLA = "MLA"
    MP = "MP"


class Ballot(BaseModel):
    voter_id: str = Field(..., alias="voterID")
    candidate: str
    position: Position
    cast_at: datetime = Field(..., alias="timestamp")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_document(cls, doc: dict) -> "Ballot":
        return cls(
            voterID=doc["voterID"],
            candidate=doc["candidate"],
            position=doc["position"],
            timestamp=doc["timestamp"],
        )

    def to_document(self) -> dict:
        return {
            "voterID": self.voter_id,
            "candidate": self.candidate,
            "position": self.position.value,
            "timestamp": self.cast_at,
        }


class TallyEntry(BaseModel):
    candidate: str
    position: Position
    total_votes: int = Field(..., alias="totalVotes")

    model_config = {"populate_by_name": True}
