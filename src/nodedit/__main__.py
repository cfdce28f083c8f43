"""Entry point: python -m nodedit

Takes no arguments. Connects, loads the table and runs the editor until
`quit`. Exit code 0 on quit, 1 on a failed write-back or any unhandled
error in the event loop.
"""

from __future__ import annotations

import asyncio
import locale
import logging
import os
import sys

from nodedit.config import NodeditConfig, load_config

logger = logging.getLogger("nodedit")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _setup_locale() -> None:
    # Sorting collates project names with the user's locale.
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("Could not set collation locale, using code point order")


def _handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    logger.critical(
        "Unhandled error: %s", context.get("message"), exc_info=context.get("exception")
    )
    # Reports from Task.__del__ swallow SystemExit, so leave without unwinding.
    logging.shutdown()
    sys.stdout.flush()
    os._exit(1)


async def _run(config: NodeditConfig) -> None:
    from nodedit.interpreter import Interpreter
    from nodedit.storage import SQLStorage
    from nodedit.store import RecordStore
    from nodedit.terminal import Terminal

    asyncio.get_running_loop().set_exception_handler(_handle_loop_exception)

    storage = SQLStorage(config.database.url, table=config.database.table)
    await storage.connect()

    interpreter = Interpreter(RecordStore(config.table_schema), storage, Terminal())
    await interpreter.start()


def main() -> None:
    config = load_config()
    _setup_logging(config.log_level)
    _setup_locale()

    from nodedit.writeback import PersistenceError

    try:
        asyncio.run(_run(config))
    except KeyboardInterrupt:
        pass
    except PersistenceError:
        logger.error("Write-back failed, table may be incomplete", exc_info=True)
        sys.exit(1)
    except Exception:
        logger.critical("Unhandled error", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
