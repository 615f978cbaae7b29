"""Process-wide logging setup.

Library modules only call ``logging.getLogger(__name__)``; the composition
root calls ``configure_logging`` once at startup.

Log format:
    2026-10-19 12:00:00,000 INFO mm.tx [submit] 0xab12... to=0x... value=0 gas=61200
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    root = logging.getLogger()
    if root.handlers and not force:
        return
    numeric = getattr(logging, level.strip().upper(), logging.INFO)
    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=force)
