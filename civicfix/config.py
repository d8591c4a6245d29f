"""
Settings for the official matching service.

Values are read from the environment (or a local .env file) once and
handed to the collaborators that need them. Business logic never reads
os.environ itself.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

#matching policy
BEST_MATCH_THRESHOLD = 30
ALTERNATIVE_THRESHOLD = 20
MAX_ALTERNATIVES = 3

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "civicfix.db"


class Settings(BaseSettings):
    project_name: str = Field(default="CivicFix Official Matching API")
    version: str = Field(default="0.2.0")
    log_level: str = Field(default="INFO")

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8001)

    database_path: Path = Field(default=DEFAULT_DB_PATH, description="sqlite profile directory")

    cors_allow_origins: str = Field(
        default="http://127.0.0.1:3333,http://localhost:3333",
        description="comma separated list of allowed origins"
    )

    best_match_threshold: int = Field(default=BEST_MATCH_THRESHOLD)
    alternative_threshold: int = Field(default=ALTERNATIVE_THRESHOLD)
    max_alternatives: int = Field(default=MAX_ALTERNATIVES)

    site_url: str = Field(default="https://civicfix.gov.in")

    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_phone_number: Optional[str] = None

    sendgrid_api_key: Optional[str] = None
    email_from_address: str = Field(default="noreply@civicfix.gov.in")
    email_from_name: str = Field(default="CivicFix")

    request_timeout: float = Field(default=10.0, description="seconds per outbound notification call")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def sms_enabled(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendgrid_api_key)

    def get_cors_origins(self) -> List[str]:
        raw = (self.cors_allow_origins or "").strip()
        if not raw:
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
