"""Worklist computation: targets minus the already-migrated set."""

from typing import Iterable, List


def reconcile(targets: Iterable[str], done: Iterable[str]) -> List[str]:
    """Return every target not present in *done*, in first-occurrence order.

    Duplicate targets collapse onto their first position in *targets*; the
    result never depends on hash iteration order.
    """
    # dict keeps insertion order, so it doubles as an ordered set
    pending = dict.fromkeys(targets)
    for url in set(done):
        pending.pop(url, None)
    return list(pending)
