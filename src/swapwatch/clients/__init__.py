"""Transport and ABI clients (JSON-RPC log polling, block explorer)."""

from swapwatch.clients.etherscan import get_contract_abi
from swapwatch.clients.rpc import RPC, LogPoller

__all__ = [
    "RPC",
    "LogPoller",
    "get_contract_abi",
]
