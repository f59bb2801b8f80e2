"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "Contabilito"
    DEBUG: bool = False
    CORS_ORIGINS: list[str] = [
        "http://localhost:4321",
        "http://localhost:3000",
    ]

    # Database
    DATABASE_URL: str = "sqlite:///./contabilito.db"

    # Auth
    JWT_SECRET: str = "super-secret-jwt-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 10

    # Registration policy
    PASSWORD_MIN_LENGTH: int = 6
    REQUIRE_TERMS_ACCEPTED: bool = True

    # Demo seed
    DEMO_EMAIL: str = "demo@contabilito.local"
    DEMO_USERNAME: str = "demo"
    DEMO_PASSWORD: str = "changeme123"
    DEMO_COMPANY: str = "Demo Company"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
