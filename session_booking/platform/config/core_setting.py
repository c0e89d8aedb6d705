import json
from pathlib import Path
from typing import Annotated, List, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


def _parse_str_list(v: str | List[str]) -> List[str]:
    """'a, b' or '["a", "b"]' -> ['a', 'b']"""
    if isinstance(v, list):
        return v
    if v.startswith('['):
        return json.loads(v)
    return [i.strip() for i in v.split(',') if i.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Session Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS (NoDecode: env values reach the validator as raw strings)
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        return _parse_str_list(v)

    # Session store backend: 'scylla' for ScyllaDB, 'memory' for local runs and tests
    SESSION_STORE_BACKEND: Literal['scylla', 'memory'] = 'scylla'

    # Booking use case: attempts per request when the session version moved underneath us
    BOOKING_MAX_ATTEMPTS: int = 3

    @field_validator('BOOKING_MAX_ATTEMPTS')
    @classmethod
    def validate_booking_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError('BOOKING_MAX_ATTEMPTS must be at least 1')
        return v

    # ScyllaDB Configuration
    SCYLLA_CONTACT_POINTS: Annotated[List[str], NoDecode] = ['localhost']
    SCYLLA_PORT: int = 9042
    SCYLLA_KEYSPACE: str = 'session_booking'
    SCYLLA_USERNAME: str = 'cassandra'  # Default username in developer mode
    SCYLLA_PASSWORD: SecretStr = SecretStr('cassandra')  # Default password in developer mode
    SCYLLA_CONNECT_TIMEOUT: int = 10  # Connection timeout (seconds)
    SCYLLA_CONTROL_TIMEOUT: int = 10  # Control connection timeout (seconds)
    SCYLLA_REQUEST_TIMEOUT: float = 10.0  # Request timeout (seconds)

    @field_validator('SCYLLA_CONTACT_POINTS', mode='before')
    @classmethod
    def assemble_scylla_contact_points(cls, v: str | List[str]) -> List[str]:
        return _parse_str_list(v) or ['localhost']


settings = Settings()  # type: ignore
