from urllib.parse import quote
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, Dict, Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "AI Workflow Gateway"
    API_PREFIX: str = "/api"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Database
    DATABASE_URL: Optional[str] = None
    SUPABASE_URL: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    SUPABASE_POOLER_HOST: str = "aws-1-ap-south-1.pooler.supabase.com"
    SUPABASE_POOLER_PORT: int = 6543
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 5
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = False

    # Auth
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    # Outbound workflow calls
    WORKFLOW_EXECUTION_TIMEOUT: float = 30.0
    HTTP_MAX_CONNECTIONS: int = 100
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 20

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def supabase_project_ref(self) -> Optional[str]:
        """
        Project reference from a Supabase URL, e.g. https://abc.supabase.co -> abc
        """
        if not self.SUPABASE_URL:
            return None
        host = self.SUPABASE_URL.removeprefix("https://").removeprefix("http://")
        ref = host.split(".supabase.co")[0]
        return ref or None

    @property
    def uses_supabase_pooler(self) -> bool:
        return not self.DATABASE_URL and bool(self.SUPABASE_URL)

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if not self.SUPABASE_URL:
            raise ValueError("Either DATABASE_URL or SUPABASE_URL must be configured")

        ref = self.supabase_project_ref
        if not ref:
            raise ValueError(f"Invalid SUPABASE_URL format: {self.SUPABASE_URL}")

        password = quote(self.DB_PASSWORD or "", safe="")
        return (
            f"postgresql+asyncpg://postgres.{ref}:{password}"
            f"@{self.SUPABASE_POOLER_HOST}:{self.SUPABASE_POOLER_PORT}/postgres"
        )

    @property
    def DATABASE_CONNECT_ARGS(self) -> Dict[str, Any]:
        # The transaction pooler cannot hold prepared statements across transactions
        if self.uses_supabase_pooler:
            return {"ssl": "require", "statement_cache_size": 0}
        return {}

settings = Settings()
