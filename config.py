# config.py
# Configuration

# Solana RPC endpoint (Sonic devnet)
RPC_URL = "https://devnet.sonic.game"

# Commitment level used when waiting for transaction confirmation
COMMITMENT = "confirmed"

# Sonic Odyssey API hosts
API_BASE = "https://odyssey-api-beta.sonic.game"
# Milestone rewards are only served from the non-beta host
MILESTONE_API_BASE = "https://odyssey-api.sonic.game"

# Headers shared by every API request
HEADERS = {
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Content-Type": "application/json",
    "Origin": "https://odyssey.sonic.game",
    "Referer": "https://odyssey.sonic.game/",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                  "(KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36",
}

# HTTP request timeout in seconds
REQUEST_TIMEOUT = 30

# Path to JSON file with an array of base58 private keys
PRIVATE_KEYS_FILE = "privateKeys.json"

# Number of random addresses to send SOL to per account
ADDRESS_COUNT = 100

# Amount of SOL sent to every random address
AMOUNT_TO_SEND = 0.001

# Delay after each SOL transfer (seconds)
DELAY_BETWEEN_TX_SEC = 1

# Delay after each milestone claim (seconds)
DELAY_BETWEEN_CLAIMS_SEC = 1

# Delay between accounts (seconds), not applied after the last one
DELAY_BETWEEN_ACCOUNTS_SEC = 5

# Daily transaction milestones, ascending. Stage number is index + 1
MILESTONES = [10, 30, 50]

# Claim types to run for every account: check_in, milestones, mystery_box
ENABLED_CLAIMS = {"check_in", "milestones", "mystery_box"}

# Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
LOG_LEVEL = "INFO"

# Log file path
LOG_FILE = "sonic_log.txt"

LAMPORTS_PER_SOL = 1_000_000_000
