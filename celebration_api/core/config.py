from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Celebration House Booking API"
    API_PREFIX: str = "/api"

    # Server
    PORT: int = 5000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    SHUTDOWN_TIMEOUT_SECONDS: float = 10.0

    # MySQL
    DB_HOST: str = "localhost"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "celebration_house"
    DB_PORT: int = 3306

    # Pool
    DB_POOL_SIZE: int = 2
    DB_CONNECT_TIMEOUT: int = 20
    DB_POOL_RECYCLE: int = 60
    KEEPALIVE_INTERVAL_SECONDS: float = 300.0

    # Retry
    DB_QUERY_RETRIES: int = 3
    DB_RETRY_BACKOFF_SECONDS: float = 1.0
    DB_EMPTY_ON_RETRY_EXHAUSTION: bool = False

    # Bookings
    TIMEZONE: str = "Asia/Kolkata"

    # Admin dashboard
    API_BASE_URL: str = "http://localhost:5000"

    @property
    def database_url(self) -> str:
        return (
            f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
        )

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
