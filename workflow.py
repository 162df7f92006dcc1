# workflow.py
import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Awaitable, Callable, Iterable, List, Optional

import requests
from solders.keypair import Keypair

import config
from chain import ChainGateway
from logger import get_logger
from sonic_api import AuthClient, RewardsClient
from utils import generate_random_addresses, keypair_from_private_key, load_private_keys, shorten_address

logger = get_logger("Workflow", config.LOG_LEVEL)

CLAIM_CHECK_IN = "check_in"
CLAIM_MILESTONES = "milestones"
CLAIM_MYSTERY_BOX = "mystery_box"
CLAIM_TYPES = frozenset({CLAIM_CHECK_IN, CLAIM_MILESTONES, CLAIM_MYSTERY_BOX})


class AccountWorkflow:
    """Runs the per-account routine: transfer sweep, login, profile, check-in,
    milestone claims and mystery boxes. Steps run strictly in that order.
    """

    def __init__(
        self,
        chain: Optional[ChainGateway] = None,
        auth: Optional[AuthClient] = None,
        rewards: Optional[RewardsClient] = None,
        address_count: int = config.ADDRESS_COUNT,
        amount_to_send: float = config.AMOUNT_TO_SEND,
        delay_between_tx: float = config.DELAY_BETWEEN_TX_SEC,
        delay_between_claims: float = config.DELAY_BETWEEN_CLAIMS_SEC,
        milestones: Optional[Iterable[int]] = None,
        enabled_claims: Optional[Iterable[str]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.chain = chain or ChainGateway()
        # One session per run; AuthClient clears its cookies before every login
        session = requests.Session()
        self.auth = auth or AuthClient(session=session)
        self.rewards = rewards or RewardsClient(self.chain, session=session)
        self.address_count = address_count
        self.amount_to_send = amount_to_send
        self.delay_between_tx = delay_between_tx
        self.delay_between_claims = delay_between_claims
        self.milestones = sorted(config.MILESTONES if milestones is None else milestones)
        self.enabled_claims = set(config.ENABLED_CLAIMS if enabled_claims is None else enabled_claims)
        unknown = self.enabled_claims - CLAIM_TYPES
        if unknown:
            raise ValueError(f"Unknown claim types: {sorted(unknown)}")
        self.sleep = sleep

    def transfer_sweep(self, keypair: Keypair, wallet_index: int) -> int:
        """Sends amount_to_send to address_count random addresses. Returns the number of successful sends."""
        wallet_short = shorten_address(str(keypair.pubkey()))
        sent = 0
        for address in generate_random_addresses(self.address_count):
            try:
                self.chain.send_sol(keypair, address, self.amount_to_send)
                sent += 1
                logger.info(f"Account #{wallet_index} ({wallet_short}): sent {self.amount_to_send} SOL to {address}")
            except Exception as e:
                logger.error(f"Account #{wallet_index} ({wallet_short}): failed to send SOL to {address}: {e}")
            self.sleep(self.delay_between_tx)
        logger.info(f"Account #{wallet_index} ({wallet_short}): transfers done, {sent}/{self.address_count} sent")
        return sent

    def claim_milestones(self, token: str, wallet_index: int) -> List[int]:
        """Claims milestones in ascending order, stopping at the first one not reached.
        Returns the stages that were attempted.
        """
        logger.info(f"Account #{wallet_index}: claiming transaction milestone rewards...")
        transaction_count = self.rewards.fetch_daily_transaction_count(token)
        logger.info(f"Account #{wallet_index}: total daily transactions: {transaction_count}")

        attempted = []
        for stage, milestone in enumerate(self.milestones, start=1):
            if transaction_count < milestone:
                logger.warning(f"Account #{wallet_index}: not enough transactions to claim {milestone} milestone reward")
                break
            attempted.append(stage)
            self.rewards.claim_milestone(token, stage)
            self.sleep(self.delay_between_claims)
        return attempted

    def open_mystery_boxes(self, token: str, keypair: Keypair, count: int, wallet_index: int) -> int:
        """Attempts exactly `count` box opens. Returns how many succeeded."""
        opened = 0
        for i in range(count):
            logger.info(f"Account #{wallet_index}: mystery box {i + 1}/{count}")
            if self.rewards.open_mystery_box(token, keypair) is not None:
                opened += 1
        return opened

    def process_account(self, private_key: str, wallet_index: int, claim_only_mode: bool = False) -> bool:
        """Processes one account. Returns False when it had to stop early."""
        try:
            keypair = keypair_from_private_key(private_key)
        except Exception as e:
            logger.error(f"Account #{wallet_index}: invalid private key: {e}")
            return False

        address = str(keypair.pubkey())
        wallet_short = shorten_address(address)

        if not claim_only_mode:
            self.transfer_sweep(keypair, wallet_index)

        token = self.auth.authenticate(keypair)
        if not token:
            logger.error(f"Account #{wallet_index} ({wallet_short}): authentication failed, skipping remaining steps")
            return False

        logger.info(f"Account #{wallet_index}: processing Sonic Odyssey operations for {address}")
        profile = self.rewards.get_profile(token)
        if profile is None:
            logger.warning(f"Account #{wallet_index} ({wallet_short}): no profile, mystery boxes will be skipped")
            available_boxes = 0
        else:
            logger.info(f"Account #{wallet_index}: SOL balance: {profile.sol_balance}")
            logger.info(f"Account #{wallet_index}: ring balance: {profile.ring_balance}")
            logger.info(f"Account #{wallet_index}: available boxes: {profile.available_boxes}")
            available_boxes = profile.available_boxes

        if CLAIM_CHECK_IN in self.enabled_claims:
            self.rewards.daily_check_in(token, keypair)

        if CLAIM_MILESTONES in self.enabled_claims:
            self.claim_milestones(token, wallet_index)

        if CLAIM_MYSTERY_BOX in self.enabled_claims:
            self.open_mystery_boxes(token, keypair, available_boxes, wallet_index)

        logger.info(f"Account #{wallet_index} ({wallet_short}): done")
        return True


async def run_accounts(
    claim_only_mode: bool = False,
    private_keys: Optional[List[str]] = None,
    workflow: Optional[AccountWorkflow] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """Processes every account in file order, one at a time, pausing between accounts."""
    if private_keys is None:
        private_keys = load_private_keys(config.PRIVATE_KEYS_FILE)
    workflow = workflow or AccountWorkflow()
    total = len(private_keys)
    logger.info(f"Processing {total} accounts ({'claims only' if claim_only_mode else 'transfers and claims'})")

    # Single worker keeps accounts strictly sequential
    executor = ThreadPoolExecutor(max_workers=1)
    loop = asyncio.get_running_loop()
    try:
        for index, private_key in enumerate(private_keys, start=1):
            logger.info(f"Processing account {index}/{total}")
            try:
                await loop.run_in_executor(executor, workflow.process_account, private_key, index, claim_only_mode)
            except Exception as e:
                logger.error(f"Account #{index}: unexpected error: {e}")

            if index < total:
                logger.info(f"Proceeding to next account in {config.DELAY_BETWEEN_ACCOUNTS_SEC} seconds...")
                await sleep(config.DELAY_BETWEEN_ACCOUNTS_SEC)
    finally:
        executor.shutdown(wait=True)

    logger.info("All accounts processed.")
