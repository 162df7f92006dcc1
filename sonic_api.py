# sonic_api.py
import base64
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests
from nacl.signing import SigningKey
from solders.keypair import Keypair
from solders.transaction import Transaction

import config
from chain import ChainGateway
from exceptions import NetworkError, ServerBusinessError, SignatureError
from logger import get_logger
from utils import shorten_address

logger = get_logger("SonicApi", config.LOG_LEVEL)

ALREADY_CLAIMED = "already claimed"

CHECK_IN_BUILD_PATH = "/user/check-in/transaction"
CHECK_IN_SUBMIT_PATH = "/user/check-in"
MYSTERY_BOX_BUILD_PATH = "/user/rewards/mystery-box/build-tx"
MYSTERY_BOX_OPEN_PATH = "/user/rewards/mystery-box/open"


@dataclass
class Profile:
    wallet_balance: int
    ring_balance: float
    available_boxes: int

    @property
    def sol_balance(self) -> float:
        return self.wallet_balance / config.LAMPORTS_PER_SOL

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Profile":
        return cls(
            wallet_balance=int(data.get("wallet_balance") or 0),
            ring_balance=float(data.get("ring") or 0),
            available_boxes=int(data.get("ring_monitor") or 0),
        )


def sign_challenge(keypair: Keypair, challenge: Union[str, bytes]) -> str:
    """Detached ed25519 signature of the challenge, base64 encoded."""
    message = challenge.encode("utf-8") if isinstance(challenge, str) else challenge
    try:
        signature = SigningKey(keypair.secret()).sign(message).signature
    except Exception as e:
        raise SignatureError(f"Failed to sign challenge: {e}") from e
    return base64.b64encode(signature).decode()


class _ApiClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        api_base: str = config.API_BASE,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = config.REQUEST_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.api_base = api_base.rstrip("/")
        self.headers = dict(config.HEADERS if headers is None else headers)
        self.timeout = timeout

    def _request(self, method: str, url: str, token: Optional[str] = None,
                 auth_required: bool = False, **kwargs) -> Any:
        """Performs a request and returns the `data` field of the JSON body.
        Transport failures raise NetworkError, error responses raise ServerBusinessError.
        """
        headers = dict(self.headers)
        if auth_required:
            if not token:
                raise NetworkError(f"No auth token, refusing to call {url}")
            headers["Authorization"] = token

        try:
            resp = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise ServerBusinessError(message or resp.text or f"HTTP {resp.status_code}", resp.status_code)
        if not isinstance(body, dict):
            raise NetworkError(f"{method} {url}: response is not a JSON object")
        return body.get("data")


class AuthClient(_ApiClient):
    """Challenge/response login. Returns a bearer token or None."""

    def authenticate(self, keypair: Keypair) -> Optional[str]:
        public_key = keypair.pubkey()
        address = str(public_key)
        # Cookies from the previous account must not leak into this login
        self.session.cookies.clear()
        try:
            challenge = self._request(
                "GET", f"{self.api_base}/auth/sonic/challenge", params={"wallet": address}
            )
            if not challenge:
                raise ServerBusinessError("Empty challenge")

            payload = {
                "address": address,
                "address_encoded": base64.b64encode(bytes(public_key)).decode(),
                "signature": sign_challenge(keypair, challenge),
            }
            data = self._request("POST", f"{self.api_base}/auth/sonic/authorize", json=payload)
            token = (data or {}).get("token")
            if not token:
                raise ServerBusinessError("Authorize response has no token")
        except Exception as e:
            logger.error(f"Error fetching token for {shorten_address(address)}: {e}")
            return None

        logger.debug(f"Authenticated {shorten_address(address)}")
        return token


class RewardsClient(_ApiClient):
    """Profile, milestone and server-built transaction calls for an authenticated wallet."""

    def __init__(
        self,
        chain: ChainGateway,
        session: Optional[requests.Session] = None,
        api_base: str = config.API_BASE,
        milestone_api_base: str = config.MILESTONE_API_BASE,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = config.REQUEST_TIMEOUT,
    ):
        super().__init__(session, api_base, headers, timeout)
        self.chain = chain
        self.milestone_api_base = milestone_api_base.rstrip("/")

    def get_profile(self, token: Optional[str]) -> Optional[Profile]:
        try:
            data = self._request("GET", f"{self.api_base}/user/rewards/info", token, auth_required=True)
            return Profile.from_api(data or {})
        except Exception as e:
            logger.error(f"Error fetching profile: {e}")
            return None

    def fetch_daily_transaction_count(self, token: Optional[str]) -> int:
        try:
            data = self._request(
                "GET", f"{self.api_base}/user/transactions/state/daily", token, auth_required=True
            )
            return int((data or {}).get("total_transactions") or 0)
        except Exception as e:
            logger.error(f"Error fetching daily transactions: {e}")
            return 0

    def claim_milestone(self, token: Optional[str], stage: int) -> bool:
        """Claims the reward of a milestone stage. 'already claimed' counts as success."""
        try:
            self._request(
                "POST",
                f"{self.milestone_api_base}/user/transactions/rewards/claim",
                token,
                auth_required=True,
                json={"stage": stage},
            )
        except ServerBusinessError as e:
            if str(e.message).strip().lower() == ALREADY_CLAIMED:
                logger.info(f"Milestone stage {stage} reward already claimed")
                return True
            logger.error(f"Failed to claim milestone stage {stage} (HTTP {e.status_code}): {e}")
            return False
        except Exception as e:
            logger.error(f"Failed to claim milestone stage {stage}: {e}")
            return False

        logger.info(f"Successfully claimed milestone stage {stage} reward")
        return True

    def submit_server_transaction(self, token: Optional[str], keypair: Keypair,
                                  build_path: str, submit_path: str) -> Optional[Dict[str, Any]]:
        """Fetches a server-built transaction, co-signs it, lands it on-chain,
        then reports the signature back. Returns the server's `data` or None on failure.
        """
        wallet_short = shorten_address(str(keypair.pubkey()))
        try:
            data = self._request("GET", f"{self.api_base}{build_path}", token, auth_required=True)
            tx_hash = (data or {}).get("hash")
            if not tx_hash:
                raise ServerBusinessError(f"{build_path} returned no transaction")

            tx = Transaction.from_bytes(base64.b64decode(tx_hash))
            try:
                tx.partial_sign([keypair], tx.message.recent_blockhash)
            except Exception as e:
                raise SignatureError(f"Failed to co-sign transaction: {e}") from e

            signature = self.chain.submit_and_confirm(bytes(tx))
            logger.info(f"{wallet_short}: transaction confirmed, signature {signature}")

            result = self._request(
                "POST", f"{self.api_base}{submit_path}", token, auth_required=True, json={"hash": signature}
            )
        except Exception as e:
            logger.error(f"{wallet_short}: {submit_path} failed: {e}")
            return None
        return result or {}

    def daily_check_in(self, token: Optional[str], keypair: Keypair) -> Optional[Dict[str, Any]]:
        logger.info("Performing daily check-in...")
        result = self.submit_server_transaction(token, keypair, CHECK_IN_BUILD_PATH, CHECK_IN_SUBMIT_PATH)
        if result is not None:
            logger.info(f"Daily check-in successful! Accumulative days: {result.get('accumulative_days')}")
        return result

    def open_mystery_box(self, token: Optional[str], keypair: Keypair) -> Optional[Dict[str, Any]]:
        logger.info("Opening mystery box...")
        result = self.submit_server_transaction(token, keypair, MYSTERY_BOX_BUILD_PATH, MYSTERY_BOX_OPEN_PATH)
        if result is not None:
            logger.info(f"Mystery box opened successfully! Amount: {result.get('amount')}")
        return result
