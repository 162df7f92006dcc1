# main.py
import asyncio
import sys
from logger import get_logger
import config
from chain import ChainGateway
from workflow import run_accounts

logger = get_logger("Main", config.LOG_LEVEL)

ASCII_BANNER = r"""
  ____   ___  _   _ ___ ____    ___  ______   ______ ____  _______   __
 / ___| / _ \| \ | |_ _/ ___|  / _ \|  _ \ \ / / ___/ ___|| ____\ \ / /
 \___ \| | | |  \| || | |     | | | | | | \ V /\___ \___ \|  _|  \ V /
  ___) | |_| | |\  || | |___  | |_| | |_| || |  ___) |__) | |___  | |
 |____/ \___/|_| \_|___\____|  \___/|____/ |_| |____/____/|_____| |_|
"""


def print_banner() -> None:
    print(ASCII_BANNER)
    print(f"RPC: {config.RPC_URL}")
    print(f"API: {config.API_BASE}\n")


def menu() -> None:
    print("Select an action:")
    print("1. Start transfers and claims")
    print("2. Start claims only")
    print("3. Check RPC connection")
    print("4. Exit")


async def check_rpc() -> None:
    """Reports whether the configured RPC node answers"""
    print("Checking RPC connectivity...\n")
    try:
        status = "OK" if ChainGateway().is_connected() else "FAIL"
        print(f"{config.RPC_URL}: {status}")
    except Exception as e:
        print(f"{config.RPC_URL}: ERROR ({e})")
    print()


async def main_loop() -> None:
    print_banner()
    while True:
        try:
            menu()
            choice = input("Enter action number: ").strip()
            if choice == "1":
                logger.info("Starting transfers and claims...")
                await run_accounts(claim_only_mode=False)
            elif choice == "2":
                logger.info("Starting claims only...")
                await run_accounts(claim_only_mode=True)
            elif choice == "3":
                logger.info("Checking RPC connectivity...")
                await check_rpc()
            elif choice == "4":
                logger.info("Exiting...")
                sys.exit(0)
            else:
                print("Invalid input, please try again.\n")
        except Exception as e:
            logger.error(f"Error in main loop: {e}")
            print("An error occurred, please try again.\n")


def run() -> None:
    asyncio.run(main_loop())


if __name__ == "__main__":
    run()
