"""
Solana RPC client service for interacting with the Solana blockchain.
"""

from typing import Any, Dict

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
import structlog


logger = structlog.get_logger(__name__)


class SolanaClient:
    """Async Solana RPC client wrapper with health checking."""

    def __init__(self, rpc_config: Dict[str, Any]):
        """Initialize Solana client with RPC configuration."""
        self.rpc_config = rpc_config
        self.client = AsyncClient(
            endpoint=rpc_config["endpoint"],
            commitment=Commitment(rpc_config["commitment"]),
            timeout=rpc_config["timeout"]
        )
        self.logger = logger.bind(service="solana_client")

    async def close(self):
        """Close the RPC client connection."""
        await self.client.close()

    async def get_health(self) -> bool:
        """Check if the RPC endpoint is healthy."""
        try:
            return await self.client.is_connected()
        except Exception as e:
            self.logger.error("Health check failed", error=str(e))
            return False
