# promptsync/core/file_reader.py
from pathlib import Path
from typing import Sequence
from loguru import logger

from .errors import ReadFailure

DEFAULT_ENCODINGS = ("utf-8",)


def read_text(file_path: Path, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    """
    Reads a whole file as text, trying each encoding in order.
    Raises ReadFailure if the file cannot be read or none of the encodings fit.
    """
    path = Path(file_path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        raise ReadFailure(path, "file not found") from None
    except OSError as e:
        raise ReadFailure(path, str(e)) from e

    for enc in encodings:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            logger.trace(f"{path.name} is not valid {enc}")
            continue
        except LookupError:
            logger.warning(f"Unknown encoding '{enc}' in configuration, skipping.")
            continue
    raise ReadFailure(path, f"could not decode as any of {list(encodings)}")
