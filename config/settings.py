from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Validation defaults: metadata-only, non-strict, cached
    enable_contract_analysis: bool = False
    enable_metadata_validation: bool = True
    enable_external_validation: bool = False  # privacy-first: no third-party lookups
    validation_timeout_ms: int = 10_000
    enable_caching: bool = True
    strict_mode: bool = False

    # Score bands (score >= band → level)
    score_band_low: int = 80
    score_band_medium: int = 60
    score_band_high: int = 30

    # Distribution heuristic: holder share of total supply that counts as airdrop spam
    airdrop_share_threshold_pct: float = 90.0

    # Validation cache
    cache_backend: str = "memory"  # "memory" or "redis"
    cache_ttl_sec: int = 300
    redis_url: str = "redis://localhost:6379/0"

    # GoPlus Security (free tier, no key)
    goplus_max_rps: float = 0.5

    # Token list registry (standard tokenlists.org schema)
    token_list_url: str = "https://tokens.uniswap.org"

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_rate_limit: str = "60/minute"
    default_risk_tolerance: str = "medium"


settings = Settings()
