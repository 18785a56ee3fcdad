"""Pydantic models for application configuration with validation."""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator


class KiteConfig(BaseModel):
    """Zerodha Kite Connect configuration."""

    api_key: str = Field(
        default="",
        description="Kite Connect API key"
    )
    api_secret: str = Field(
        default="",
        description="Kite Connect API secret"
    )
    access_token: Optional[str] = Field(
        default=None,
        description="Session access token from the Kite login flow"
    )
    exchange: str = Field(
        default="NSE",
        description="Exchange used to qualify quote symbols and to route orders"
    )
    product: Literal["CNC"] = Field(
        default="CNC",
        description="Order product type. CNC=delivery"
    )
    order_variety: Literal["regular"] = Field(
        default="regular",
        description="Order variety passed to the order placement API"
    )
    request_timeout_seconds: int = Field(
        default=7,
        ge=1,
        le=60,
        description="Timeout for Kite Connect HTTP requests"
    )

    @field_validator("exchange")
    @classmethod
    def normalize_exchange(cls, v: str) -> str:
        """Exchange codes are upper case, e.g. NSE or BSE."""
        return v.strip().upper()


class RebalanceConfig(BaseModel):
    """Rebalancing policy."""

    excluded_symbols: List[str] = Field(
        default_factory=lambda: ["SETFNIF50", "NIFTYBEES", "LIQUIDBEES"],
        description="Symbols that never receive allocations and never set the target value"
    )
    limit_order_symbols: List[str] = Field(
        default_factory=lambda: ["FMCGIETF", "HDFCSENSEX"],
        description="Symbols bought with a LIMIT order priced from order book depth"
    )
    limit_depth_level: int = Field(
        default=4,
        ge=0,
        le=4,
        description="Zero-indexed order book level used to price LIMIT orders"
    )
    benchmark_symbol: Optional[str] = Field(
        default="NIFTY 50",
        description="Index quoted alongside holdings for reference"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Console/file log format"
    )
    file_path: Optional[str] = Field(
        default=None,
        description="Log file rotated daily; console only when unset"
    )
    backup_count: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Number of rotated log files to keep"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseModel):
    """Root application configuration."""

    kite: KiteConfig = Field(
        default_factory=KiteConfig,
        description="Kite Connect settings"
    )
    rebalance: RebalanceConfig = Field(
        default_factory=RebalanceConfig,
        description="Rebalancing policy"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )
