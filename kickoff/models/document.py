from sqlalchemy import Column, String, Text, DateTime
from kickoff.core.database import Base
import datetime


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class TournamentDocument(Base):
    __tablename__ = "tournament_documents"

    id = Column(String, primary_key=True, index=True)
    body = Column(Text, nullable=False) # Dehydrated TournamentState as JSON
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
