from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="WEATHER_RECORDER_")
    output_dir: Path = Path(".")
    log_dir: Optional[Path] = Path("logs")
    log_level: str = "INFO"


config = Config()
