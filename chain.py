# chain.py
from typing import Optional

from solana.rpc.api import Client
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

import config
from exceptions import ChainSubmissionError
from logger import get_logger
from utils import get_client

logger = get_logger("Chain", config.LOG_LEVEL)


def sol_to_lamports(amount_sol: float) -> int:
    return int(round(amount_sol * config.LAMPORTS_PER_SOL))


class ChainGateway:
    """Thin wrapper over the Solana RPC client: payments, raw submission and confirmation."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_client()

    def is_connected(self) -> bool:
        return bool(self.client.is_connected())

    def send_sol(self, sender: Keypair, to_address: str, amount_sol: float) -> str:
        """Sends `amount_sol` from sender to to_address, waits for confirmation, returns the signature."""
        try:
            ix = transfer(
                TransferParams(
                    from_pubkey=sender.pubkey(),
                    to_pubkey=Pubkey.from_string(to_address),
                    lamports=sol_to_lamports(amount_sol),
                )
            )
            blockhash = self.client.get_latest_blockhash().value.blockhash
            tx = Transaction.new_signed_with_payer([ix], sender.pubkey(), [sender], blockhash)
            signature = self.client.send_transaction(tx).value
        except Exception as e:
            raise ChainSubmissionError(f"Transfer to {to_address} rejected: {e}") from e

        self.confirm(signature)
        return str(signature)

    def submit_raw_transaction(self, raw_tx: bytes) -> Signature:
        try:
            signature = self.client.send_raw_transaction(raw_tx).value
        except Exception as e:
            raise ChainSubmissionError(f"RPC rejected transaction: {e}") from e
        logger.debug(f"Transaction sent, signature: {signature}")
        return signature

    def confirm(self, signature: Signature) -> None:
        """Blocks until the signature reaches the configured commitment."""
        try:
            resp = self.client.confirm_transaction(signature)
        except Exception as e:
            raise ChainSubmissionError(f"Confirmation failed for {signature}: {e}") from e

        statuses = resp.value or []
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            raise ChainSubmissionError(f"Transaction {signature} failed on-chain: {status.err}")

    def submit_and_confirm(self, raw_tx: bytes) -> str:
        signature = self.submit_raw_transaction(raw_tx)
        self.confirm(signature)
        return str(signature)
