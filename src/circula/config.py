"""Configuration for Circula."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_prefix="CIRCULA_")

    backend: Literal["local", "remote"] = Field(default="local")
    data_dir: str = Field(default="~/.circula")
    tasks_file: str = Field(default="tasks.yaml")

    # Remote backend (PostgREST-style table)
    remote_url: str | None = Field(default=None)
    remote_api_key: str | None = Field(default=None)
    remote_user_id: str | None = Field(default=None)
    remote_table: str = Field(default="tasks")
    remote_timeout: float = Field(default=10.0)

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    log_level: str = Field(default="info")

    def get_tasks_path(self) -> Path:
        """Path of the local tasks file."""
        return Path(self.data_dir).expanduser() / self.tasks_file
