from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "TalentHub"
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    # Tokens are stateless; rotating the secret invalidates every session.
    jwt_secret: str = "change-me-in-production-talenthub-jwt-secret"
    jwt_algorithm: str = "HS256"
    jwt_expires_seconds: int = 7 * 24 * 60 * 60  # 7 days

    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    allowed_upload_extensions: tuple[str, ...] = (".pdf", ".doc", ".docx")

    allowed_origins: list[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]

    @property
    def db_path(self) -> Path:
        return self.data_path / "talenthub.sqlite"

    @property
    def uploads_dir(self) -> Path:
        return self.data_path / "uploads"

    model_config = {"env_prefix": "TALENTHUB_"}


settings = Settings()
