# promptsync/core/token_counter.py
from functools import lru_cache
from typing import Any, Optional
from loguru import logger

try:
    import tiktoken
    TIKTOKEN_AVAILABLE = True
except ImportError:
    logger.warning("tiktoken library not found. Token counts will be estimated.")
    tiktoken = None # type: ignore
    TIKTOKEN_AVAILABLE = False

DEFAULT_ENCODING = "cl100k_base"
CHARS_PER_TOKEN = 4 # Rough estimate used when no encoder is available


@lru_cache(maxsize=4)
def _get_cached_encoder(encoding_name: str) -> Optional[Any]:
    """Loads an encoder once. Loading may need to fetch data, so it is deferred until first count."""
    if not TIKTOKEN_AVAILABLE:
        return None
    try:
        encoder = tiktoken.get_encoding(encoding_name) # type: ignore[union-attr]
        logger.debug(f"Loaded tiktoken encoder '{encoding_name}'.")
        return encoder
    except Exception as e:
        logger.warning(f"Could not load tiktoken encoder '{encoding_name}', estimating instead: {e}")
        return None


def estimate_tokens(text: str) -> int:
    return len(text) // CHARS_PER_TOKEN


def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """Counts tokens in a rendered prompt. Falls back to a character estimate."""
    if not text:
        return 0
    encoder = _get_cached_encoder(encoding_name)
    if encoder is None:
        return estimate_tokens(text)
    try:
        return len(encoder.encode(text, disallowed_special=()))
    except Exception as e:
        logger.error(f"Error counting tokens with '{encoding_name}': {e}")
        return estimate_tokens(text)
