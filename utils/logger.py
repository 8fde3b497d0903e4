"""
Script contains logger setup for dex-lookup
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

logger = logging.getLogger(name="dexlookup")


def setup_logging(verbose=False):
    # stdout is reserved for the report
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)
