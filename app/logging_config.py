# app/logging_config.py
import logging

from app.config import get_settings

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """
    Configure the root logger once for the whole process.
    Module loggers (generate_sow, sow_client, rfp_document, ...) propagate here.
    """
    lvl = (level or get_settings().log_level or "INFO").upper()
    root = logging.getLogger()
    if not any(getattr(h, "_rfp_handler", False) for h in root.handlers):
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(_FORMAT))
        h._rfp_handler = True  # type: ignore[attr-defined]
        root.addHandler(h)
    root.setLevel(getattr(logging, lvl, logging.INFO))

    # httpx logs every request at INFO; keep that out of the app log
    logging.getLogger("httpx").setLevel(logging.WARNING)
