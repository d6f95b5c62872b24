"""Block explorer client for contract ABIs."""

from __future__ import annotations

import json
from typing import Any

import httpx

from swapwatch.core.config import ETHERSCAN_API_URL
from swapwatch.errors import AbiFetchError


async def get_contract_abi(
    address: str,
    api_key: str,
    *,
    url: str = ETHERSCAN_API_URL,
    client: httpx.AsyncClient | None = None,
) -> list[dict[str, Any]]:
    """Fetch the verified ABI of `address` (module=contract, action=getabi)."""
    params = {
        "module": "contract",
        "action": "getabi",
        "address": address,
        "apikey": api_key,
    }
    owns_client = client is None
    session = client or httpx.AsyncClient(timeout=20)
    try:
        r = await session.get(url, params=params)
        r.raise_for_status()
        data = r.json()
    finally:
        if owns_client:
            await session.aclose()

    result = data.get("result")
    if data.get("status") == "1" and isinstance(result, str):
        return json.loads(result)
    message = data.get("message") or "Unknown error"
    raise AbiFetchError(f"Error fetching ABI for {address}. Error: {message}")
