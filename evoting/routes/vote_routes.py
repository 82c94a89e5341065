from fastapi import APIRouter, Depends

from evoting.auth import get_current_admin
from evoting.dependencies import get_tally_service, get_vote_service
from evoting.errors import InvalidInput
from evoting.schemas import VoteRequest
from evoting.tally import TallyService
from evoting.voting import VoteAdmissionService

vote_router = APIRouter(tags=["Vote"])


# ------------------------------
# CAST VOTE
# ------------------------------
@vote_router.post("/vote")
def cast_vote(body: VoteRequest, service: VoteAdmissionService = Depends(get_vote_service)):
    service.cast_vote(body.voterID, body.candidate, body.position)
    return {"success": True, "message": "Vote cast successfully!"}


# ------------------------------
# CHECK IF VOTER HAS ALREADY VOTED
# ------------------------------
@vote_router.get("/check-vote")
@vote_router.get("/check-vote/")
def check_vote_missing_id():
    raise InvalidInput("Voter ID is required")


@vote_router.get("/check-vote/{voter_id}")
def check_vote(voter_id: str, service: VoteAdmissionService = Depends(get_vote_service)):
    ballots = service.find_ballots_for(voter_id)
    return {
        "success": True,
        "hasVoted": bool(ballots),
        "votes": [ballot.model_dump(by_alias=True, mode="json") for ballot in ballots],
    }


# ------------------------------
# RESULTS
# ------------------------------
@vote_router.get("/results")
def get_results(service: TallyService = Depends(get_tally_service)):
    results = service.compute_results()
    return {
        "success": True,
        "results": [
            {
                "_id": {"candidate": entry.candidate, "position": entry.position.value},
                "totalVotes": entry.total_votes,
            }
            for entry in results
        ],
    }


# ------------------------------
# ADMIN RESET
# ------------------------------
@vote_router.delete("/clear-votes", tags=["Admin"])
def clear_votes(
    admin: dict = Depends(get_current_admin),
    service: VoteAdmissionService = Depends(get_vote_service),
):
    deleted = service.clear_all_ballots()
    return {
        "success": True,
        "message": "All votes cleared",
        "deletedCount": deleted,
    }
