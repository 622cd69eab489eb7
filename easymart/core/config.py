from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import List

load_dotenv()

class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGIN: str = "http://localhost:8080,http://localhost:5173"
    DATABASE_PATH: str = "data/pos.db"
    API_PREFIX: str = "/api"
    LOGIN_RATE_LIMIT: str = "20/minute"
    LOG_LEVEL: str = "INFO"
    SEED_ON_STARTUP: bool = False

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.DATABASE_PATH}"


settings = Settings()
