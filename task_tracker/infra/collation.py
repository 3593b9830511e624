from __future__ import annotations

import locale
import logging

logger = logging.getLogger(__name__)


def setup_collation() -> None:
    """Use the user's locale for string collation (title sort)."""
    try:
        selected = locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("System collation locale unavailable, keeping C ordering: %s", exc)
        return
    logger.debug("Collation locale set to %s", selected)
