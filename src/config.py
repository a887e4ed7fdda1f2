"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings

MIB = 1024 * 1024


class Settings(BaseSettings):
    # Database
    database_url: str
    database_pool_size: int = 5
    store_write_timeout_seconds: float = 10.0

    # Email (transactional provider, Resend-compatible API)
    email_api_url: str = "https://api.resend.com/emails"
    email_api_key: str = ""
    email_from: str = ""
    notify_email_to: str = "pedidos@reconstruir-apoio.pt"
    email_timeout_seconds: float = 10.0

    # Request limits
    max_body_bytes: int = 2 * MIB
    max_file_bytes: int = 20 * MIB
    max_files: int = 20

    # CORS: any site may embed the forms
    cors_allow_origins: list[str] = ["*"]

    # App
    log_level: str = "INFO"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()  # type: ignore[call-arg]
