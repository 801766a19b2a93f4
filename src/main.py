import logging
import os
import argparse

from telegram.ext import Application

from borga_bot import BorgaBot
from catalog.board_game_atlas import BoardGameAtlasCatalog, DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from services.borga_service import BorgaService
from stores.memory_store import MemoryStore

POLLING_INTERVAL_SECONDS = 1


def main(catalog_url: str = DEFAULT_BASE_URL, catalog_timeout: float = DEFAULT_TIMEOUT_SECONDS,
         strict_ownership: bool = False, run_in_debug: bool = False):
    logging.basicConfig(format='%(asctime)s [%(levelname)s] (%(name)s) - %(message)s',
                        level=logging.DEBUG if run_in_debug else logging.INFO)
    catalog = BoardGameAtlasCatalog(os.getenv("BGA_CLIENT_ID", ""), base_url=catalog_url, timeout=catalog_timeout)

    async def close_catalog(_: Application):
        await catalog.aclose()

    application = Application.builder().token(os.getenv("BORGA_BOT_TOKEN")).post_shutdown(close_catalog).build()
    service = BorgaService(MemoryStore(), catalog, strict_ownership=strict_ownership)
    borga_bot = BorgaBot(service, application)
    borga_bot.application.run_polling(POLLING_INTERVAL_SECONDS)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--catalog-url", type=str, default=DEFAULT_BASE_URL, help="Board Game Atlas API base url")
    parser.add_argument("--catalog-timeout", type=float, default=DEFAULT_TIMEOUT_SECONDS,
                        help="seconds to wait for the game catalog")
    parser.add_argument("--strict-ownership", action="store_true",
                        help="only let users modify groups they hold")
    parser.add_argument("--debug", action="store_true", help="run with debug logging")
    args = parser.parse_args()

    main(args.catalog_url, args.catalog_timeout,
         strict_ownership=args.strict_ownership,
         run_in_debug=args.debug,
    )
