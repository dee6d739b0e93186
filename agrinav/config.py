"""
Centralized configuration management using Pydantic Settings.

Configuration is loaded from environment variables (and ``.env``) with
sensible defaults. Every tier of the voice router can be tuned here without
code changes.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingConfig(BaseSettings):
    """Semantic (embedding) tier configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AGRINAV_EMBEDDING_",
        env_file=".env",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable the embedding tier")
    model: str = Field(
        default="sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2",
        description="Multilingual sentence-transformers model",
    )
    device: str = Field(default="cpu", description="Device for embeddings (cpu or cuda)")
    strategy: Literal["centroid", "block"] = Field(
        default="centroid",
        description="centroid = mean of per-sentence vectors; block = whole block embedded once",
    )
    min_confidence: float = Field(
        default=0.40,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for an embedding decision to win",
    )
    cache_path: Optional[Path] = Field(
        default=None,
        description="Optional .npz file to persist catalogue embeddings across restarts",
    )
    init_on_demand: bool = Field(
        default=True,
        description="Start a background initialization when a query reaches an uninitialized index",
    )
    init_wait_timeout: float = Field(
        default=0.0,
        ge=0.0,
        description="Seconds a query may wait for an in-flight initialization (0 = never wait)",
    )


class RemoteTierConfig(BaseSettings):
    """Remote reasoning tier configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AGRINAV_REMOTE_",
        env_file=".env",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable the remote reasoning tier")
    backend: Literal["gemini", "groq", "openai", "ollama"] = Field(
        default="gemini",
        description="LLM backend for remote classification",
    )
    model: str = Field(default="gemini-2.5-flash", description="Remote model name")
    api_key: Optional[str] = Field(default=None, description="API key (falls back to the provider env var)")
    base_url: Optional[str] = Field(default=None, description="Override the backend base URL")
    timeout: float = Field(default=8.0, gt=0.0, description="Timeout in seconds for one remote call")
    temperature: float = Field(default=0.0, description="Sampling temperature (0.0 = deterministic)")
    max_tokens: int = Field(default=256, ge=32, le=2048, description="Max tokens for the JSON decision")
    min_confidence: float = Field(
        default=0.50,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a remote decision to win",
    )
    max_examples_per_route: int = Field(
        default=6,
        ge=0,
        description="Example phrases per route included in the prompt",
    )


class LocalTierConfig(BaseSettings):
    """On-device reasoning tier configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AGRINAV_LOCAL_",
        env_file=".env",
        extra="ignore",
    )

    backend: Literal["none", "ollama"] = Field(
        default="none",
        description="none = tier always defers; ollama = local daemon",
    )
    model: str = Field(default="qwen2.5:1.5b", description="Local model name")
    base_url: str = Field(default="http://localhost:11434", description="Local daemon URL")
    timeout: float = Field(default=4.0, gt=0.0, description="Timeout in seconds for one local call")
    min_confidence: float = Field(
        default=0.60,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a local decision to win",
    )


class ConnectivityConfig(BaseSettings):
    """Connectivity signal configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AGRINAV_CONNECTIVITY_",
        env_file=".env",
        extra="ignore",
    )

    assume_online: bool = Field(default=True, description="Initial connectivity state")
    probe_url: Optional[str] = Field(
        default=None,
        description="URL probed periodically to refresh the online flag (disabled if unset)",
    )
    probe_interval: float = Field(default=30.0, gt=0.0, description="Seconds between probes")
    probe_timeout: float = Field(default=3.0, gt=0.0, description="Timeout in seconds for one probe")

    @field_validator("probe_url")
    @classmethod
    def _empty_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class RouterConfig(BaseSettings):
    """Tier orchestrator configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AGRINAV_ROUTER_",
        env_file=".env",
        extra="ignore",
    )

    fallback_log: Optional[Path] = Field(
        default=None,
        description="JSONL file recording queries the first attempted tier did not resolve",
    )


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_prefix="AGRINAV_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # General
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Startup behavior
    load_embeddings_on_startup: bool = Field(
        default=True, description="Warm the embedding index in the background on startup"
    )

    # Nested configs
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    remote: RemoteTierConfig = Field(default_factory=RemoteTierConfig)
    local: LocalTierConfig = Field(default_factory=LocalTierConfig)
    connectivity: ConnectivityConfig = Field(default_factory=ConnectivityConfig)
    router: RouterConfig = Field(default_factory=RouterConfig)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()


# Singleton settings instance
settings = Settings()
