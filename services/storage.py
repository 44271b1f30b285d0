# /services/storage.py

import logging
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

LOAD_SHEET_FOLDER = "load_sheets"


def save_load_sheet(content: bytes, storage_dir: str, public_base_url: str) -> str:
    """Writes a load sheet PDF under storage_dir and returns the URL it is served from."""
    relative = f"{LOAD_SHEET_FOLDER}/{uuid.uuid4()}.pdf"
    path = Path(storage_dir) / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger.info("Load sheet saved: %s (%d bytes)", path, len(content))
    return f"{public_base_url.rstrip('/')}/{relative}"
