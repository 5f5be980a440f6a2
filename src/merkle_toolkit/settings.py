from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Depth used by the CLI when --depth is not given
    default_depth: int = Field(default=20, alias="MERKLE_DEFAULT_DEPTH")

    # Refuse appends beyond 2**depth leaves (advisory when false)
    enforce_capacity: bool = Field(default=True, alias="MERKLE_ENFORCE_CAPACITY")

    bench_depth: int = Field(default=16, alias="MERKLE_BENCH_DEPTH")
    bench_rounds: int = Field(default=5, alias="MERKLE_BENCH_ROUNDS")

    log_level: str = Field(default="INFO", alias="MERKLE_LOG_LEVEL")


settings = Settings()  # load at import
