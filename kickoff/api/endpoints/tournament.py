import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from kickoff.api.dependencies import get_tournament_service
from kickoff.core.config import settings
from kickoff.core.errors import TournamentError, UnknownReferenceError
from kickoff.core.security import require_admin
from kickoff.models.competitor_model import CompetitorModel
from kickoff.models.standings_model import StandingRow
from kickoff.models.tournament_model import TournamentState
from kickoff.schemas.tournament_schemas import (
    AddPlayerRequest,
    AddTeamRequest,
    CompetitorSwapRequest,
    FormatRequest,
    LeagueRoundResponse,
    ScorePayload,
)
from kickoff.services import league_service
from kickoff.services.tournament_service import TournamentService

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(error: TournamentError) -> HTTPException:
    if isinstance(error, UnknownReferenceError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def _run(method, *args):
    try:
        return method(*args)
    except TournamentError as e:
        logger.info("Rejected %s: %s", method.__name__, e)
        raise _http_error(e)


# --- Read endpoints ---

@router.get("", response_model=TournamentState, summary="Get the tournament document")
async def get_tournament(service: TournamentService = Depends(get_tournament_service)):
    return service.get_state()


@router.get("/standings", response_model=List[StandingRow], summary="Standings for the active format")
async def get_standings(
    structure: Literal["league", "bracket"] = Query("league", description="Compute the table from the league or the bracket"),
    service: TournamentService = Depends(get_tournament_service),
):
    """
    Rows are ordered by points, goal difference, goals scored and finally name.
    A win is worth 3 points and a draw 1.
    """
    return _run(service.standings_table, structure)


@router.get("/bracket/champion", response_model=Optional[CompetitorModel], summary="Winner of the active bracket")
async def get_champion(service: TournamentService = Depends(get_tournament_service)):
    return service.champion()


@router.get("/league/rounds/{page}", response_model=LeagueRoundResponse, summary="One round of league fixtures")
async def get_league_round(
    page: int = Path(..., ge=1, description="Page number, one page per round, starting at 1"),
    service: TournamentService = Depends(get_tournament_service),
):
    state = service.get_state()
    league = state.league_for(state.format_key)
    if league is None:
        raise HTTPException(status_code=404, detail=f"No {state.format_key} league has been generated.")
    total_pages = len(league_service.league_rounds(league))
    round_idx, matches = league_service.league_page(league, page)
    return LeagueRoundResponse(
        page=min(page, total_pages),
        total_pages=total_pages,
        round_idx=round_idx,
        matches=matches,
    )


# --- Roster (admin only) ---

@router.post("/players", response_model=TournamentState, status_code=201, dependencies=[Depends(require_admin)])
async def add_player(payload: AddPlayerRequest, service: TournamentService = Depends(get_tournament_service)):
    """Adds a player. The 1v1 bracket and league are discarded."""
    return _run(service.add_player, payload.name)


@router.delete("/players/{player_id}", response_model=TournamentState, dependencies=[Depends(require_admin)])
async def remove_player(player_id: str = Path(...), service: TournamentService = Depends(get_tournament_service)):
    return _run(service.remove_player, player_id)


@router.post("/teams", response_model=TournamentState, status_code=201, dependencies=[Depends(require_admin)])
async def add_team(payload: AddTeamRequest, service: TournamentService = Depends(get_tournament_service)):
    """Forms a 2v2 team. The 2v2 bracket and league are discarded."""
    return _run(service.add_team, payload.player_ids)


@router.delete("/teams/{team_id}", response_model=TournamentState, dependencies=[Depends(require_admin)])
async def remove_team(team_id: str = Path(...), service: TournamentService = Depends(get_tournament_service)):
    return _run(service.remove_team, team_id)


@router.put("/format", response_model=TournamentState, dependencies=[Depends(require_admin)])
async def set_format(payload: FormatRequest, service: TournamentService = Depends(get_tournament_service)):
    return _run(service.set_format, payload.format)


# --- Knockout bracket (admin only) ---

@router.post("/bracket", response_model=TournamentState, status_code=201, dependencies=[Depends(require_admin)])
async def generate_bracket(service: TournamentService = Depends(get_tournament_service)):
    """(Re)generates the bracket of the active format. Any progress is lost."""
    return _run(service.generate_bracket)


@router.post(
    "/bracket/matches/{round_idx}/{match_idx}/score",
    response_model=TournamentState,
    dependencies=[Depends(require_admin)],
)
async def record_bracket_score(
    payload: ScorePayload,
    round_idx: int = Path(..., ge=0),
    match_idx: int = Path(..., ge=0),
    service: TournamentService = Depends(get_tournament_service),
):
    """
    Records a knockout result and moves the winner on.
    On a draw the configured tie policy decides: either the home side goes
    through, or `decider` must name the slot that won.
    """
    return _run(
        service.record_bracket_score,
        round_idx,
        match_idx,
        payload.home_score,
        payload.away_score,
        settings.KNOCKOUT_TIE_POLICY,
        payload.decider,
    )


@router.put(
    "/bracket/matches/{round_idx}/{match_idx}/competitor",
    response_model=TournamentState,
    dependencies=[Depends(require_admin)],
)
async def swap_bracket_competitor(
    payload: CompetitorSwapRequest,
    round_idx: int = Path(..., ge=0),
    match_idx: int = Path(..., ge=0),
    service: TournamentService = Depends(get_tournament_service),
):
    """Corrects who plays in a slot; results that no longer apply are cleared downstream."""
    return _run(service.swap_bracket_competitor, round_idx, match_idx, payload.slot, payload.competitor_id)


# --- League (admin only) ---

@router.post("/league", response_model=TournamentState, status_code=201, dependencies=[Depends(require_admin)])
async def generate_league(service: TournamentService = Depends(get_tournament_service)):
    return _run(service.generate_league)


@router.post("/league/matches/{match_id}/score", response_model=TournamentState, dependencies=[Depends(require_admin)])
async def record_league_score(
    payload: ScorePayload,
    match_id: str = Path(...),
    service: TournamentService = Depends(get_tournament_service),
):
    return _run(service.record_league_score, match_id, payload.home_score, payload.away_score)


@router.delete("", response_model=TournamentState, dependencies=[Depends(require_admin)])
async def reset_tournament(service: TournamentService = Depends(get_tournament_service)):
    """Throws away the bracket and league of the active format. The roster stays."""
    return _run(service.reset_tournament)
