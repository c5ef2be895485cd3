"""Runtime settings, loaded from ``GLOBSCAN_*`` environment variables or a ``.env`` file."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	model_config = SettingsConfigDict(
		env_prefix="GLOBSCAN_",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)

	# Pipeline
	workers: int = Field(default=4, ge=1)
	output_path: Optional[str] = "output.txt"
	shard_dir: Optional[str] = None
	shard_prefix: str = "threaded_output_"
	keep_shards: bool = False
	in_memory_sinks: bool = False
	join_timeout: Optional[float] = Field(default=None, gt=0)

	# Unit discovery
	extensions: str = ".py"

	# Logging
	log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
	log_format: Literal["json", "console"] = "console"

	def extension_list(self) -> List[str]:
		return [e.strip() for e in self.extensions.split(",") if e.strip()]


_settings: Optional[Settings] = None


def get_settings() -> Settings:
	global _settings
	if _settings is None:
		_settings = Settings()
	return _settings


def reset_settings() -> None:
	"""Drop the cached settings (tests)."""
	global _settings
	_settings = None
