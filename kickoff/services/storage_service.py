import json
import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from kickoff.core.config import Settings, settings
from kickoff.core.database import Base, make_engine, make_session_factory
from kickoff.models.bracket_model import BracketModel
from kickoff.models.document import TournamentDocument
from kickoff.models.tournament_model import TournamentState
from kickoff.services.tournament_service import default_state

logger = logging.getLogger(__name__)


# --- Sparse-key adapter ---
# Document stores such as Firestore cannot hold nested arrays, so a bracket's
# rounds (a list of lists) are stored as an object keyed by round index.

def dehydrate_state(state: TournamentState) -> Dict[str, Any]:
    data = state.model_dump(mode="json", by_alias=True)
    for bracket in data["brackets"].values():
        if bracket is not None:
            bracket["rounds"] = {str(idx): matches for idx, matches in enumerate(bracket["rounds"])}
    return data


def _rounds_as_list(rounds: Any) -> List[Any]:
    if isinstance(rounds, dict):
        # "10" must come after "9", so sort on the number, not the string
        return [rounds[key] for key in sorted(rounds, key=int)]
    return list(rounds or [])


def _hydrate_bracket(raw: Optional[Dict[str, Any]]) -> Optional[BracketModel]:
    if raw is None:
        return None
    bracket = BracketModel.model_validate({**raw, "rounds": _rounds_as_list(raw.get("rounds"))})
    if not bracket.match_map:
        bracket = BracketModel.from_rounds(bracket.rounds)
    return bracket


def hydrate_state(data: Dict[str, Any]) -> TournamentState:
    """Accepts both the dehydrated form and plain round lists."""
    brackets = {fmt: _hydrate_bracket(raw) for fmt, raw in (data.get("brackets") or {}).items()}
    return TournamentState.model_validate({**data, "brackets": brackets})


# --- Stores ---

class JsonStateStore:
    """Keeps the snapshot in a single JSON file, rewritten on every save."""

    def __init__(self, file_path: str = settings.state_file_path):
        self.file_path = file_path
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def load(self) -> TournamentState:
        if not os.path.exists(self.file_path):
            return default_state()
        try:
            with open(self.file_path, "r") as f:
                content = f.read()
            if not content:
                return default_state()
            return hydrate_state(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Could not read tournament state from %s, using defaults: %s", self.file_path, e)
            return default_state()

    def save(self, state: TournamentState) -> None:
        with open(self.file_path, "w") as f:
            json.dump(state.model_dump(mode="json", by_alias=True), f, indent=4)


class SqlStateStore:
    """Stores the dehydrated snapshot as one row of a documents table."""

    def __init__(self, database_url: str = settings.DATABASE_URL, document_id: str = settings.DOCUMENT_ID):
        self.document_id = document_id
        self.engine = make_engine(database_url)
        Base.metadata.create_all(bind=self.engine)
        self.SessionLocal = make_session_factory(self.engine)

    def load(self) -> TournamentState:
        db = self.SessionLocal()
        try:
            document = db.get(TournamentDocument, self.document_id)
            body = document.body if document is not None else None
        finally:
            db.close()

        if body is None:
            return default_state()
        try:
            return hydrate_state(json.loads(body))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Could not read tournament document %s, using defaults: %s", self.document_id, e)
            return default_state()

    def save(self, state: TournamentState) -> None:
        body = json.dumps(dehydrate_state(state))
        db = self.SessionLocal()
        try:
            document = db.get(TournamentDocument, self.document_id)
            if document is None:
                db.add(TournamentDocument(id=self.document_id, body=body))
            else:
                document.body = body
            db.commit()
        finally:
            db.close()


def build_state_store(config: Settings):
    if config.STORAGE_BACKEND == "sql":
        return SqlStateStore(config.DATABASE_URL, config.DOCUMENT_ID)
    if config.STORAGE_BACKEND == "json":
        return JsonStateStore(config.state_file_path)
    raise ValueError(f"Unknown storage backend '{config.STORAGE_BACKEND}'.")


@lru_cache()
def get_state_store():
    return build_state_store(settings)
