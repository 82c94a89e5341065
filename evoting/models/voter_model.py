from datetime import datetime

from pydantic import BaseModel, Field


class VoterAccount(BaseModel):
    voter_id: str = Field(..., alias="voterID")
    username: str  # canonical form, see security.canonical_username
    credential_hash: str = Field(..., alias="password", repr=False)
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_document(cls, doc: dict) -> "VoterAccount":
        return cls(
            voterID=doc["voterID"],
            username=doc["username"],
            password=doc["password"],
            createdAt=doc["createdAt"],
        )

    def to_document(self) -> dict:
        return {
            "voterID": self.voter_id,
            "username": self.username,
            "password": self.credential_hash,
            "createdAt": self.created_at,
        }
