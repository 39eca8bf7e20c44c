from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Cinema Booking Engine'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # Seat holds
    HOLD_TTL_SECONDS: int = 600
    MAX_SEATS_PER_HOLD: int = 10
    HOLD_SWEEP_INTERVAL_SECONDS: int = 30

    # Payment
    MAX_PAYMENT_ATTEMPTS: int = 3
    PAYMENT_REFERENCE_PREFIX: str = 'CBCDO'

    # Ticket issuance
    TICKET_CODE_PREFIX: str = 'TICK'
    TICKET_CODE_MAX_ATTEMPTS: int = 5

    # Local development
    SEED_DEMO_CATALOG: bool = True

    @field_validator(
        'HOLD_TTL_SECONDS',
        'MAX_SEATS_PER_HOLD',
        'MAX_PAYMENT_ATTEMPTS',
        'TICKET_CODE_MAX_ATTEMPTS',
    )
    @classmethod
    def must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError('must be >= 0')
        return v


settings = Settings()  # type: ignore
