import os
from dotenv import load_dotenv


class Settings:
    def __init__(self) -> None:
        # Load variables from .env into environment
        load_dotenv()
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "changeme")
        # ERP REST backend the snapshots are read from
        self.ERP_API_BASE_URL: str = os.getenv("ERP_API_BASE_URL", "http://localhost:8080/api")
        self.ERP_API_TIMEOUT: float = float(os.getenv("ERP_API_TIMEOUT", "10"))
        self.DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "en")
        # Dashboard origin (used in CORS)
        self.FRONTEND_BASE_URL: str = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
        # Optional comma-separated list of additional allowed origins for CORS
        self.ALLOWED_ORIGINS: list[str] = [
            o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()
        ]


settings = Settings()
