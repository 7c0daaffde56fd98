# loancheck/core/config.py

from __future__ import annotations

import os

from pydantic import BaseModel

DEFAULT_AUTH_URL = "https://api.c.pfcld.com/v1/jwt-generator-business-ms/jwt/generateToken"
DEFAULT_ELIGIBILITY_URL = "https://api.c.pfcld.com/v1/veritec-business-ms/veritec/eligibility"
DEFAULT_EXPIRES_IN_S = 28800


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, "true" if default else "false").strip().lower() == "true"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class RemoteConfig(BaseModel):
    """Remote eligibility service endpoints and client credentials."""
    auth_url: str = DEFAULT_AUTH_URL
    eligibility_url: str = DEFAULT_ELIGIBILITY_URL
    authorization_server_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    timeout_s: float = 30.0
    default_expires_in_s: int = DEFAULT_EXPIRES_IN_S

    def credentials_payload(self) -> dict[str, str]:
        return {
            "authorizationServerId": self.authorization_server_id,
            "clientId": self.client_id,
            "clientSecret": self.client_secret,
        }


class BulkConfig(BaseModel):
    """Bulk run behavior."""
    keep_partial_on_auth_expiry: bool = True


class StorageConfig(BaseModel):
    """Token store selection."""
    token_store: str = "inmem"
    sqlite_path: str = "./loancheck_state.db"


class LoanCheckConfig(BaseModel):
    """Top-level loancheck configuration."""
    remote: RemoteConfig = RemoteConfig()
    bulk: BulkConfig = BulkConfig()
    storage: StorageConfig = StorageConfig()
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    @classmethod
    def from_env(cls) -> "LoanCheckConfig":
        """Loads configuration from environment variables."""
        return cls(
            remote=RemoteConfig(
                auth_url=_env("LOANCHECK_AUTH_URL", DEFAULT_AUTH_URL),
                eligibility_url=_env("LOANCHECK_ELIGIBILITY_URL", DEFAULT_ELIGIBILITY_URL),
                authorization_server_id=_env("LOANCHECK_AUTH_SERVER_ID", ""),
                client_id=_env("LOANCHECK_CLIENT_ID", ""),
                client_secret=_env("LOANCHECK_CLIENT_SECRET", ""),
                timeout_s=max(0.1, _env_float("LOANCHECK_HTTP_TIMEOUT_S", 30.0)),
                default_expires_in_s=_env_int("LOANCHECK_DEFAULT_EXPIRES_IN_S", DEFAULT_EXPIRES_IN_S),
            ),
            bulk=BulkConfig(
                keep_partial_on_auth_expiry=_env_bool("LOANCHECK_KEEP_PARTIAL_ON_AUTH_EXPIRY", True),
            ),
            storage=StorageConfig(
                token_store=_env("LOANCHECK_TOKEN_STORE", "inmem").strip().lower(),
                sqlite_path=_env("LOANCHECK_SQLITE_PATH", "./loancheck_state.db"),
            ),
            api_host=_env("LOANCHECK_API_HOST", "0.0.0.0"),
            api_port=_env_int("LOANCHECK_API_PORT", 8000),
            debug=_env_bool("LOANCHECK_DEBUG", False),
        )

config = LoanCheckConfig.from_env()
