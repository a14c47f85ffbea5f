import logging

import uvicorn
from fastapi import FastAPI

from kickoff.api.endpoints import tournament as tournament_endpoints
from kickoff.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Kickoff Tournament API")

app.include_router(tournament_endpoints.router, prefix="/api/tournament", tags=["Tournament"])


@app.get("/")
async def root():
    return {"message": "Kickoff Tournament API"}


if __name__ == "__main__":
    uvicorn.run("kickoff.main:app", host="0.0.0.0", port=8000, reload=True)
