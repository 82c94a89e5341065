from fastapi import Request

from evoting.crud import VoterRegistry
from evoting.database.connection import MongoStore
from evoting.tally import TallyService
from evoting.voting import VoteAdmissionService


def get_store(request: Request) -> MongoStore:
    return request.app.state.store


def get_voter_registry(request: Request) -> VoterRegistry:
    return VoterRegistry(get_store(request))


def get_vote_service(request: Request) -> VoteAdmissionService:
    return VoteAdmissionService(get_store(request))


def get_tally_service(request: Request) -> TallyService:
    return TallyService(get_store(request))
