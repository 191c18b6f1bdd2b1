from functools import lru_cache
from typing import Optional
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()


class EngineSettings(BaseSettings):
    database_url: str = "sqlite:///./inner_dna.db"
    database_echo: bool = False
    log_level: str = "INFO"
    json_logs: bool = True
    # Optional YAML file replacing the built-in question and scenario bank
    reference_bank_path: Optional[str] = None
    # Mixed into the per-assessment scenario selection seed
    selection_salt: str = "inner-dna"

    model_config = SettingsConfigDict(env_prefix='INNER_DNA_')


@lru_cache()
def get_settings() -> EngineSettings:
    return EngineSettings()
