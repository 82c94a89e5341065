from typing import Optional

from pydantic import BaseModel

# Fields are optional here so that missing values reach the services and
# come back as the usual 400 envelope instead of a 422.


class RegisterRequest(BaseModel):
    voterID: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class VoteRequest(BaseModel):
    voterID: Optional[str] = None
    candidate: Optional[str] = None
    position: Optional[str] = None
