from fastapi import APIRouter, Depends

from evoting.auth import create_voter_token, login_admin
from evoting.crud import VoterRegistry
from evoting.dependencies import get_voter_registry
from evoting.schemas import LoginRequest, RegisterRequest

auth_router = APIRouter(tags=["Auth"])


@auth_router.post("/register")
def register(body: RegisterRequest, registry: VoterRegistry = Depends(get_voter_registry)):
    registry.register(body.voterID, body.username, body.password)
    return {"success": True, "message": "User registered successfully!"}


@auth_router.post("/login")
def login(body: LoginRequest, registry: VoterRegistry = Depends(get_voter_registry)):
    """
    Returns the voterID the client submits with /vote and /check-vote.

    The bearer token identifies the voter session to clients. Voting endpoints
    take the voterID from the body and do not require it; the admin guard
    rejects it with 403.
    """
    voter_id = registry.authenticate(body.username, body.password)
    return {
        "success": True,
        "message": "Login successful",
        "voterID": voter_id,
        "access_token": create_voter_token(voter_id),
        "token_type": "bearer",
    }


@auth_router.post("/admin/login", tags=["Admin"])
def admin_login(body: LoginRequest):
    token = login_admin(body.username, body.password)
    return {"success": True, "access_token": token, "token_type": "bearer"}
