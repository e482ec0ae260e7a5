from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def optimistic(
    snapshot: Callable[[], T],
    apply: Callable[[], None],
    restore: Callable[[T], None],
) -> Iterator[T]:
    """
    Apply a local change before the remote call inside the ``with`` block runs.
    If the block raises, the snapshot is put back and the error re-raised.

        with optimistic(read_flag, lambda: write_flag(True), write_flag):
            remote.update(...)
    """
    prior = snapshot()
    apply()
    try:
        yield prior
    except Exception as e:
        logger.warning("rolling back optimistic update: %s", e)
        restore(prior)
        raise
