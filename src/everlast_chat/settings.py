# src/everlast_chat/settings.py
import os
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Everlast Chat")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)

    # secrets
    ANTHROPIC_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    SUPABASE_URL: str | None = None
    SUPABASE_PRIVATE_KEY: str | None = None

    # completion backends: anthropic | openai | ollama | echo
    LLM_PROVIDER: str = Field(default="anthropic")
    CHAT_MODEL: str = Field(default="claude-3-sonnet-20240229")
    CHAT_TEMPERATURE: float = Field(default=0.5)
    STYLE_MODEL: str = Field(default="claude-3-5-haiku-latest")
    STYLE_TEMPERATURE: float = Field(default=0.1)
    MAX_TOKENS: int = Field(default=1024)
    OLLAMA_HOST: str = Field(default="http://localhost:11434")

    # similarity backend: supabase | faiss
    VECTOR_STORE: str = Field(default="supabase")
    SUPABASE_TABLE: str = Field(default="documents")
    SUPABASE_QUERY_NAME: str = Field(default="match_documents")
    FAISS_PATH: str = Field(default="data/index/faiss.index")
    DB_PATH: str = Field(default="data/db/knowledge.db")

    # embeddings: openai | ollama
    EMBED_PROVIDER: str = Field(default="openai")
    EMBED_MODEL: str = Field(default="text-embedding-3-small")

    # retrieval
    RETRIEVAL_OVER_FETCH: int = Field(default=5)
    RETRIEVAL_FINAL_COUNT: int = Field(default=3)

    # style switching
    STYLE_SWITCH_THRESHOLD: float = Field(default=0.7)

    # per-call timeouts (seconds)
    CLASSIFIER_TIMEOUT_S: float = Field(default=30.0)
    RETRIEVAL_TIMEOUT_S: float = Field(default=30.0)
    COMPLETION_TIMEOUT_S: float = Field(default=120.0)

    # offline ingestion
    INGEST_CHUNK_SIZE: int = Field(default=1000)
    INGEST_CHUNK_OVERLAP: int = Field(default=200)

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_retrieval_sizes(self) -> "Settings":
        if self.RETRIEVAL_FINAL_COUNT < 1:
            raise ValueError("RETRIEVAL_FINAL_COUNT must be at least 1")
        if self.RETRIEVAL_OVER_FETCH <= self.RETRIEVAL_FINAL_COUNT:
            raise ValueError("RETRIEVAL_OVER_FETCH must exceed RETRIEVAL_FINAL_COUNT")
        if not 0 <= self.INGEST_CHUNK_OVERLAP < self.INGEST_CHUNK_SIZE:
            raise ValueError("INGEST_CHUNK_OVERLAP must be smaller than INGEST_CHUNK_SIZE")
        return self

    @property
    def app_name(self) -> str:
        return self.APP_NAME


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
