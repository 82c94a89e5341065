"""Error taxonomy shared by the services and the API layer.

Every error carries the HTTP status it maps to and a message that is safe to
return to the caller. Storage details stay in the logs.
"""
from typing import Optional


class VotingError(Exception):
    """Base class for errors rendered as ``{"success": false, "message": ...}``."""

    status_code = 400
    message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidInput(VotingError):
    status_code = 400
    message = "All fields are required"


class DuplicateVote(VotingError):
    status_code = 400
    message = "You have already voted for this position"


class AlreadyRegistered(VotingError):
    status_code = 400
    message = "Voter ID already registered"


class UsernameTaken(VotingError):
    status_code = 400
    message = "Username already taken"


class NotFound(VotingError):
    status_code = 401
    message = "User not found"


class InvalidCredential(VotingError):
    status_code = 401
    message = "Invalid credentials"


class Forbidden(VotingError):
    status_code = 403
    message = "Administrator rights required"


class StorageUnavailable(VotingError):
    status_code = 500
    message = "Internal server error"
