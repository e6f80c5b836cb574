# services/pipeline/json_writer.py
from pathlib import Path
from typing import Union

from loguru import logger

from models.card import Payload


def write_payload(payload: Payload, out_dir: Union[str, Path], filename: str) -> Path:
    """Write ``payload`` as indented UTF-8 JSON, creating ``out_dir`` if needed."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / filename
    path.write_text(payload.to_json(indent=2), encoding="utf-8")
    logger.info(f"Wrote {len(payload.items)} items to {path}")
    return path
