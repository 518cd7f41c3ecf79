import logging
import os
import shutil

from pathlib import Path

from utils.dataModels import Record
from utils.errors import RecordIOError

logger = logging.getLogger(__name__)


def load_record(path: Path) -> Record:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise RecordIOError(f"failed to read .nb file {path}: {exc}") from exc
    logger.debug("read %d bytes from %s", len(data), path)
    return Record.from_bytes(data)

def save_record(path: Path, record: Record) -> None:
    """Serialize first, then swap the file in so readers never see a partial write.

    A symlinked record is written through to its target, and an existing
    file keeps its permission bits.
    """
    payload = record.to_bytes()
    path = path.resolve()
    tmp = path.with_name(path.name + ".tmp")
    try:
        with tmp.open("wb") as f:
            f.write(payload)
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise RecordIOError(f"failed to write updated .nb file {path}: {exc}") from exc
    logger.debug("wrote %d bytes to %s", len(payload), path)
