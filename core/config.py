from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # Neo4j connection
    NEO4J_URI: str = Field(default="bolt://localhost:7687")
    NEO4J_USER: str = Field(default="neo4j")
    NEO4J_PASSWORD: str = Field(default="password")
    NEO4J_DATABASE: str = Field(default="neo4j")

    # Driver tuning (reasonable defaults)
    NEO4J_MAX_POOL_SIZE: int = Field(default=10)
    NEO4J_CONNECTION_TIMEOUT_SEC: int = Field(default=15)

    # Per-transaction deadline applied by the repositories (seconds)
    NEO4J_TX_TIMEOUT_SEC: float = Field(default=30.0, gt=0)

    LOG_LEVEL: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
