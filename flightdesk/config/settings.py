from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3


class ChainConfig(BaseSettings):
    """Blockchain node and contract configuration"""

    rpc_url: Optional[str] = "http://127.0.0.1:8545"
    contract_address: str = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
    abi_path: Optional[str] = Field(
        default=None,
        description="Hardhat artifact or raw ABI JSON; bundled ABI when unset.",
    )
    request_timeout: float = Field(default=10.0, gt=0)
    receipt_timeout: float = Field(default=120.0, gt=0)
    receipt_poll_interval: float = Field(default=0.5, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="CHAIN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("rpc_url")
    @classmethod
    def blank_rpc_url_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("contract_address")
    @classmethod
    def checksum_contract_address(cls, value: str) -> str:
        if not Web3.is_address(value):
            raise ValueError(f"Invalid contract address: {value!r}")
        return Web3.to_checksum_address(value)


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "FlightDesk"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    contract_log_file: str = "logs/contract_calls.log"
    notification_limit: int = Field(default=20, ge=1)

    # Chain
    chain: ChainConfig = Field(default_factory=ChainConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
