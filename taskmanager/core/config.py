from os import getenv


def _database_url() -> str:
    url = getenv("DATABASE_URL")
    if url:
        return url
    host = getenv("DB_HOST", "localhost")
    port = getenv("DB_PORT", "5432")
    name = getenv("DB_NAME", "taskmanager")
    user = getenv("DB_USER", "taskuser")
    password = getenv("DB_PASSWORD", "taskpass123")
    return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{name}"


class Settings:
    DATABASE_URL = _database_url()
    HOST = getenv("HOST", "0.0.0.0")
    PORT = int(getenv("PORT", "3001"))
    ENVIRONMENT = getenv("ENVIRONMENT", "development")  # development | production | test
    CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
    API_URL = getenv("API_URL", "http://localhost:3001")  # utilisé par le client
    RATE_LIMIT_MAX = int(getenv("RATE_LIMIT_MAX", "100"))
    RATE_LIMIT_WINDOW_MIN = int(getenv("RATE_LIMIT_WINDOW_MIN", "15"))  # fenêtre de 15 minutes
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

settings = Settings()
