from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./todos.db"

    # Security
    SECRET_KEY: str = "something"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    BCRYPT_ROUNDS: int = 12

    # Access policy
    # Identity-bearing requesters that are neither creator nor member still get
    # read access to a list when this is on. Turn off for strict membership reads.
    PUBLIC_READ_FALLBACK: bool = True
    # Ignore the plain X-User-Id header and only trust signed bearer tokens
    REQUIRE_SIGNED_IDENTITY: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    ERROR_LOG_PATH: str | None = "error.log"

    CORS_ORIGIN_REGEX: str = "https?://.*"

    class Config:
        env_file = ".env"

settings = Settings()
