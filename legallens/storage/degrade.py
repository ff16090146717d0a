from collections.abc import Callable
from typing import TypeVar

from legallens.logging.logger import Log
from legallens.storage.exceptions import StorageQuotaExceededError

T = TypeVar("T")


def write_with_degrade(
    write: Callable[[T], None],
    payload: T,
    shrink: Callable[[T], T],
    *,
    label: str,
) -> T:
    """Write payload, retrying exactly once with a shrunk copy on quota exhaustion.

    Only StorageQuotaExceededError triggers the retry; any other failure, and
    any failure of the retry itself, propagates to the caller.

    Returns:
        The original payload, even when the shrunk copy is what got stored.
    """
    try:
        write(payload)
        return payload
    except StorageQuotaExceededError as exc:
        Log.warning(f"Storage quota exceeded for {label}, retrying with reduced payload: {exc}")

    try:
        write(shrink(payload))
    except Exception as exc:
        Log.error(f"Failed to store reduced payload for {label}: {exc}")
        raise
    Log.info(f"Stored reduced payload for {label}")
    return payload
