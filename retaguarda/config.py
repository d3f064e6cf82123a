"""Configuração da aplicação (variáveis de ambiente com prefixo RETAGUARDA_)."""

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Parâmetros do serviço de retaguarda."""

    database_url: str = "sqlite:///./retaguarda.db"

    # JWT
    secret_key: str = "retaguarda_secret_key_change_me_in_prod"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12  # 12 horas

    # Caixa
    poll_interval_seconds: int = 10
    balance_tolerance: Decimal = Decimal("0.01")
    default_terminal_name: str = "Caixa 01"

    # Relatórios
    projection_days: int = 30

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="RETAGUARDA_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
