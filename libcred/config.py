"""Application configuration. All env vars defined here with defaults."""

from pydantic_settings import BaseSettings


class LibcredConfig(BaseSettings):
    # ── App ──
    app_name: str = "libcred"
    debug: bool = False
    log_level: str = "INFO"

    # ── Database ──
    database_url: str = "sqlite+aiosqlite:///./libcred.db"

    # ── Secrets ──
    secret_encryption_key: str = ""            # Fernet key; empty → ephemeral key (dev only)

    # ── Credentials ──
    uid_generation_retries: int = 3            # candidate uids tried before UidGenerationError
    uid_length: int = 9
    default_org_id: int = 1                    # used when no X-Org-Id header is sent
    enforce_read_only_delete: bool = False     # opt-in guard at the repository boundary

    # ── Server ──
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_prefix": "LIBCRED_", "env_file": ".env", "extra": "ignore"}


config = LibcredConfig()
