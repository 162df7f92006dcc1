# utils.py
import json
from typing import List

import base58
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment
from solders.keypair import Keypair

import config
from logger import get_logger

logger = get_logger("Utils", config.LOG_LEVEL)


def shorten_address(address: str) -> str:
    return f"{address[:6]}...{address[-4:]}"


def load_private_keys(path: str) -> List[str]:
    """Loads private keys from a JSON file holding an array of base58 strings.
    Order is preserved; accounts are processed in file order.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of private keys")

    keys = []
    for idx, pk in enumerate(data):
        if not isinstance(pk, str):
            raise ValueError(f"Entry #{idx + 1} in {path} is not a string")
        keys.append(pk.strip())

    logger.info(f"Loaded {len(keys)} private keys from {path}")
    return keys


def keypair_from_private_key(private_key: str) -> Keypair:
    """Builds a keypair from a base58 secret key (64 bytes, or a 32 byte seed)."""
    secret = base58.b58decode(private_key)
    if len(secret) == 64:
        return Keypair.from_bytes(secret)
    if len(secret) == 32:
        return Keypair.from_seed(secret)
    raise ValueError(f"Invalid private key length: {len(secret)} bytes (expected 64 or 32)")


def generate_random_addresses(count: int) -> List[str]:
    """Returns `count` valid addresses of throwaway keypairs."""
    return [str(Keypair().pubkey()) for _ in range(count)]


def get_client(rpc_url: str = config.RPC_URL) -> Client:
    """Returns a Solana RPC client with the configured commitment and timeout."""
    return Client(rpc_url, commitment=Commitment(config.COMMITMENT), timeout=config.REQUEST_TIMEOUT)
