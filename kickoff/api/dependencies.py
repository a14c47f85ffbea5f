from fastapi import Depends

from kickoff.services.storage_service import get_state_store
from kickoff.services.tournament_service import TournamentService


def get_tournament_service(store=Depends(get_state_store)) -> TournamentService:
    return TournamentService(store)
