from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from swapwatch.constants import SWAP_EVENT

INFURA_RPC_TEMPLATE = "https://mainnet.infura.io/v3/{key}"
ETHERSCAN_API_URL = "https://api.etherscan.io/api"


@dataclass(frozen=True)
class StreamConfig:
    """Configuration for the watch loop."""

    address: str
    rpc_url: str
    target_event: str = SWAP_EVENT
    out_root: Path = Path("./data")
    start_block: int | str = "latest"
    step: int = 1_000
    poll_interval_s: float = 2.0
    timeout_s: int = 20


class Settings(BaseSettings):
    """Credentials and endpoints read from the environment or a `.env` file."""

    infura_api_key: SecretStr | None = Field(None, alias="INFURA_API_KEY")
    etherscan_api_key: SecretStr | None = Field(None, alias="ETHERSCAN_API_KEY")
    rpc_url: str | None = Field(None, alias="RPC_URL")
    etherscan_api_url: str = Field(ETHERSCAN_API_URL, alias="ETHERSCAN_API_URL")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def rpc_endpoint(self) -> str:
        """Explicit RPC_URL, else the Infura mainnet endpoint for INFURA_API_KEY."""
        if self.rpc_url:
            return self.rpc_url
        if self.infura_api_key is None:
            raise ValueError("Set RPC_URL or INFURA_API_KEY")
        return INFURA_RPC_TEMPLATE.format(key=self.infura_api_key.get_secret_value())
