import os

from pydantic_settings import BaseSettings

from kickoff.models.bracket_model import TiePolicy


class Settings(BaseSettings):
    DATA_DIR: str = "data"
    STATE_FILE: str = "tournament.json"
    STORAGE_BACKEND: str = "json" # "json" or "sql"
    DATABASE_URL: str = "sqlite:///./kickoff.db"
    DOCUMENT_ID: str = "tournament-data"
    ADMIN_PASSWORD: str = "admin123"
    KNOCKOUT_TIE_POLICY: TiePolicy = TiePolicy.HOME
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "KICKOFF_"

    @property
    def state_file_path(self) -> str:
        return os.path.join(self.DATA_DIR, self.STATE_FILE)


settings = Settings()
