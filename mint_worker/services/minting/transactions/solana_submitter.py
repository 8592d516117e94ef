"""
Solana submitter for mint_card transactions.
"""

import hashlib
import struct
from typing import List, Optional

import base58
from solana.rpc.async_api import AsyncClient
from solana.rpc.types import TxOpts
from solders.compute_budget import set_compute_unit_limit
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.transaction import VersionedTransaction
import structlog

from mint_worker.core.config import Settings, SolanaConfig
from mint_worker.core.exceptions import ConfigurationError, SubmitterError
from mint_worker.services.solana_client import SolanaClient
from mint_worker.services.minting.types import MintJob, SubmissionResult
from .base import TransactionSubmitter


logger = structlog.get_logger(__name__)


def get_instruction_discriminator(instruction_name: str) -> bytes:
    """
    Get instruction discriminator for Anchor instructions.

    Anchor uses the first 8 bytes of SHA256 of "global:{instruction_name}".
    """
    namespace = f"global:{instruction_name}"
    return hashlib.sha256(namespace.encode()).digest()[:8]


def encode_string(value: str) -> bytes:
    """Borsh string: u32 little-endian length followed by UTF-8 bytes."""
    data = value.encode("utf-8")
    return struct.pack("<I", len(data)) + data


def encode_u64(value: int) -> bytes:
    """Borsh u64, little-endian."""
    if value < 0:
        raise ValueError(f"u64 value must not be negative: {value}")
    return struct.pack("<Q", value)


def encode_mint_arguments(job: MintJob) -> bytes:
    """Instruction data for mint_card: discriminator followed by Borsh arguments."""
    args = job.mint_arguments()
    return b"".join([
        get_instruction_discriminator(SolanaConfig.MINT_INSTRUCTION),
        encode_string(args["card_type"]),
        encode_u64(args["level"]),
        encode_string(args["title"]),
        encode_string(args["recipient"]),
        encode_string(args["rarity"]),
        encode_u64(args["rank"]),
    ])


class SolanaMintSubmitter(TransactionSubmitter):
    """
    Builds, signs and sends mint_card transactions with the admin keypair.

    A mint counts as successful only when the confirmed signature status
    carries no error.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncClient] = None):
        self.settings = settings
        self.logger = logger.bind(service="solana_mint_submitter")
        self.client: Optional[AsyncClient] = client
        self.solana_client: Optional[SolanaClient] = None
        self.program_id: Optional[Pubkey] = None
        self.admin_cap: Optional[Pubkey] = None
        self.admin_keypair: Optional[Keypair] = None

    async def initialize(self) -> None:
        """Load the admin keypair and check the RPC endpoint."""
        missing = [
            name for name, value in (
                ("SOLANA_ADMIN_PRIVATE_KEY", self.settings.solana_admin_private_key),
                ("SOLANA_PROGRAM_ID", self.settings.solana_program_id),
                ("SOLANA_ADMIN_CAP_ID", self.settings.solana_admin_cap_id),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                {"missing": missing}
            )

        try:
            private_key_bytes = base58.b58decode(self.settings.solana_admin_private_key)
            self.admin_keypair = Keypair.from_bytes(private_key_bytes)
            self.program_id = Pubkey.from_string(self.settings.solana_program_id)
            self.admin_cap = Pubkey.from_string(self.settings.solana_admin_cap_id)
        except ValueError as e:
            raise ConfigurationError(f"Invalid Solana credentials: {e}") from e

        if self.client is None:
            self.solana_client = SolanaClient(SolanaConfig.get_rpc_config(self.settings))
            self.client = self.solana_client.client
            healthy = await self.solana_client.get_health()
        else:
            healthy = await self.client.is_connected()

        if not healthy:
            raise SubmitterError(
                "Solana RPC endpoint is not reachable",
                {"endpoint": self.settings.solana_rpc_url}
            )

        self.logger.info(
            "Solana mint submitter initialized",
            endpoint=self.settings.solana_rpc_url,
            program_id=str(self.program_id),
            admin_cap=str(self.admin_cap),
            admin_pubkey=str(self.admin_keypair.pubkey())
        )

    async def close(self) -> None:
        if self.solana_client:
            await self.solana_client.close()

    def build_instructions(self, job: MintJob) -> List[Instruction]:
        """Compute budget instruction followed by the mint_card call."""
        accounts = [
            AccountMeta(pubkey=self.admin_keypair.pubkey(), is_signer=True, is_writable=True),  # admin
            AccountMeta(pubkey=self.admin_cap, is_signer=False, is_writable=False),  # admin cap
            AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),  # system_program
        ]
        return [
            set_compute_unit_limit(self.settings.solana_compute_unit_limit),
            Instruction(
                program_id=self.program_id,
                accounts=accounts,
                data=encode_mint_arguments(job)
            ),
        ]

    async def submit(self, job: MintJob) -> SubmissionResult:
        if not self.admin_keypair or not self.client:
            raise SubmitterError("Submitter used before initialize()")

        try:
            self.logger.info("Processing mint", mint_id=job.mint_id, recipient=job.recipient)

            blockhash_resp = await self.client.get_latest_blockhash()
            message = MessageV0.try_compile(
                payer=self.admin_keypair.pubkey(),
                instructions=self.build_instructions(job),
                address_lookup_table_accounts=[],
                recent_blockhash=blockhash_resp.value.blockhash,
            )
            transaction = VersionedTransaction(message, [self.admin_keypair])

            opts = TxOpts(skip_preflight=False, preflight_commitment=self.settings.solana_commitment)
            response = await self.client.send_transaction(transaction, opts=opts)
            signature = str(response.value)

            confirmation = await self.client.confirm_transaction(
                Signature.from_string(signature),
                commitment=self.settings.solana_commitment,
                last_valid_block_height=blockhash_resp.value.last_valid_block_height,
            )
            status = confirmation.value[0] if confirmation.value else None

            if status is None:
                return SubmissionResult.failure(f"Transaction {signature} was not confirmed")
            if status.err is not None:
                return SubmissionResult.failure(f"Transaction failed: {status.err}")

            self.logger.info("Mint successful", mint_id=job.mint_id, signature=signature)
            return SubmissionResult.ok(signature)

        except Exception as e:
            self.logger.error("Mint failed", mint_id=job.mint_id, error=str(e))
            return SubmissionResult.failure(str(e))
