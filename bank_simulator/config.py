"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
Invalid values are rejected when the settings are built, before any session starts.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional

from .currency import Currency


class BankSimulatorConfig(BaseSettings):
    """Bank simulator configuration"""
    
    model_config = SettingsConfigDict(
        env_prefix="BANK_SIM_",
        env_file=".env",
        case_sensitive=False,
    )
    
    # Persistence configuration
    data_file: str = "accounts.tsv"
    autosave: bool = False  # Save after every successful mutating command
    
    # Ledger configuration
    id_floor: int = 1001  # First account id handed out by an empty ledger
    currency: str = "USD"
    
    # Security configuration
    credential_scheme: Literal["demo", "scrypt"] = "demo"
    
    # Logging configuration
    log_level: str = "WARNING"
    log_format: Literal["json", "text"] = "json"
    log_file: Optional[str] = None  # If None, logs to stderr
    
    @field_validator("currency")
    @classmethod
    def check_currency(cls, value: str) -> str:
        return Currency.from_code(value).code


# Global configuration instance, built on first use
config: Optional[BankSimulatorConfig] = None


def get_config() -> BankSimulatorConfig:
    """Get global configuration instance"""
    global config
    if config is None:
        config = BankSimulatorConfig()
    return config


def reload_config() -> BankSimulatorConfig:
    """Reload configuration from environment"""
    global config
    config = BankSimulatorConfig()
    return config
