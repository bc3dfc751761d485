"""Configuration module for the cross-chain counter dashboard."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import TimeWindow

# Anvil's first prefunded account, unlocked on supersim dev nodes
DEFAULT_DEV_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
L2_TO_L2_CROSS_DOMAIN_MESSENGER = "0x4200000000000000000000000000000000000023"


class Config(BaseSettings):
    """Configuration for the dashboard."""

    model_config = SettingsConfigDict(env_prefix="INTEROP_COUNTER_", extra="forbid")

    # Source chain (transactions are submitted here)
    source_rpc_url: str = Field(default="http://127.0.0.1:9545")
    source_chain_id: int = Field(default=901)
    source_chain_name: str = Field(default="Supersim L2A")

    # Destination chain (counter state and events are read here)
    destination_rpc_url: str = Field(default="ws://127.0.0.1:9546")
    destination_chain_id: int = Field(default=902)
    destination_chain_name: str = Field(default="Supersim L2B")

    # Contracts
    counter_address: str = Field(default="0x1b68f70248d6d2176c88d9285564cd23173d41d3")
    incrementer_address: str = Field(default="0x52f498e866bdebec46b6939080a66332e2a1cb1e")
    messenger_address: str = Field(default=L2_TO_L2_CROSS_DOMAIN_MESSENGER)
    dev_account: str = Field(default=DEFAULT_DEV_ACCOUNT)

    # Analytics
    max_capacity: int = Field(default=100)
    default_window: str = Field(default=TimeWindow.LAST_HOUR.value)
    dedupe_events: bool = Field(default=True)
    max_event_logs: int = Field(default=100)

    # Runtime options
    receipt_poll_interval: float = Field(default=1.0)
    receipt_timeout: float = Field(default=120.0)
    log_level: str = Field(default="INFO")

    @field_validator('max_capacity', 'max_event_logs')
    def validate_positive(cls, v):
        """Validate sizes."""
        if v <= 0:
            raise ValueError("Must be positive")
        return v

    @field_validator('default_window')
    def validate_default_window(cls, v):
        """Validate the analytics window key."""
        valid = [w.value for w in TimeWindow]
        if v not in valid:
            raise ValueError(f"Invalid window: {v} (expected one of {', '.join(valid)})")
        return v

    @field_validator('receipt_poll_interval', 'receipt_timeout')
    def validate_interval(cls, v):
        """Validate polling durations."""
        if v <= 0:
            raise ValueError("Duration must be positive")
        return v

    @field_validator('log_level')
    def validate_log_level(cls, v):
        """Validate log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.default_window)
