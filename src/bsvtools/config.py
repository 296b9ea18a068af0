"""
Configuration management using pydantic-settings.

Settings come from (highest priority first) constructor arguments,
BSV_* environment variables, a .env file and a TOML config file
(config.toml in the working directory, or the path in BSV_CONFIG_FILE).

Example config.toml:

    [arc_mainnet]
    url = "https://arc.taal.com"
    api_key = "mainnet_xxx"

    [arc_testnet]
    url = "https://arc-test.taal.com"

    [polling]
    interval = 5.0
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from bsvtools.constants import DEFAULT_FEE_PER_KB
from bsvtools.errors import ConfigError

DEFAULT_CONFIG_FILE = "config.toml"
CONFIG_FILE_ENV = "BSV_CONFIG_FILE"


class ARCConfig(BaseModel):
    """ARC endpoint for one network."""

    url: str = ""
    api_key: str = ""
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")


class PollingConfig(BaseModel):
    interval: float = Field(default=5.0, gt=0, description="Seconds between status checks")
    max_retries: int = Field(default=0, ge=0, description="0 = poll until final state")
    backoff_factor: float = Field(default=1.0, ge=1.0)


class TargetsConfig(BaseModel):
    default: str = "MINED"
    wait_for_mining: bool = True

    @property
    def monitor_target(self) -> str | None:
        """Status that ends monitoring early, or None to wait for a final state."""
        return None if self.wait_for_mining else self.default


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BSV_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        toml_file=DEFAULT_CONFIG_FILE,
    )

    arc_mainnet: ARCConfig = Field(default_factory=ARCConfig)
    arc_testnet: ARCConfig = Field(default_factory=ARCConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    targets: TargetsConfig = Field(default_factory=TargetsConfig)

    whatsonchain_url: str = "https://api.whatsonchain.com/v1/bsv"
    whatsonchain_timeout: float = Field(default=30.0, gt=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def arc_for(self, testnet: bool) -> ARCConfig:
        return self.arc_testnet if testnet else self.arc_mainnet

    def validate_arc(self, testnet: bool) -> ARCConfig:
        """Return the ARC config for the network, requiring a URL."""
        arc = self.arc_for(testnet)
        if not arc.url:
            network = "testnet" if testnet else "mainnet"
            raise ConfigError(
                f"ARC URL is required for {network} "
                f"(set [arc_{network}] url in {DEFAULT_CONFIG_FILE} "
                f"or BSV_ARC_{network.upper()}__URL)"
            )
        return arc


def get_settings(config_file: Path | None = None) -> Settings:
    """
    Load settings, reading the TOML file at config_file if given.

    Raises:
        ConfigError: If an explicitly requested config file does not exist
    """
    if config_file is None and os.environ.get(CONFIG_FILE_ENV):
        config_file = Path(os.environ[CONFIG_FILE_ENV])

    if config_file is None:
        return Settings()

    if not config_file.exists():
        raise ConfigError(f"config file not found: {config_file}")

    class FileSettings(Settings):
        model_config = SettingsConfigDict(toml_file=config_file)

    return FileSettings()


class CarveOptions(BaseModel):
    """Options for building one transaction."""

    address: str = Field(..., min_length=1, description="Destination address")
    sats: int = Field(default=0, ge=0, description="Amount in satoshis (0 = send all)")
    split: int = Field(default=1, description="Number of equal payment outputs")
    testnet: bool = False
    fee_per_kb: int = Field(default=DEFAULT_FEE_PER_KB, ge=0)
