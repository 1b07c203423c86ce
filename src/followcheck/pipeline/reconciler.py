"""Reconciler: asymmetric set difference of two relationship lists.

Pure functions: no I/O, deterministic, order-preserving.
"""

from collections.abc import Sequence
from enum import Enum

from followcheck.models import IdentityKey, UserIdentity


class Difference(Enum):
    """Which side is filtered and which is subtracted."""

    A_MINUS_B = "a-b"
    B_MINUS_A = "b-a"


def reconcile(
    set_a: Sequence[UserIdentity],
    set_b: Sequence[UserIdentity],
    direction: Difference,
) -> list[UserIdentity]:
    """Members of one side whose identity key is absent from the other.

    The subtracted side's keys are collected once into a set; the filtered
    side keeps its original order.

    Args:
        set_a: First relationship list
        set_b: Second relationship list
        direction: A_MINUS_B or B_MINUS_A

    Returns:
        Filtered users in the source side's order

    Example:
        >>> a = [UserIdentity("bob", "", ""), UserIdentity("carol", "", "")]
        >>> b = [UserIdentity("Bob", "", "")]
        >>> [u.login for u in reconcile(a, b, Difference.A_MINUS_B)]
        ['carol']
    """
    if direction is Difference.A_MINUS_B:
        source, subtracted = set_a, set_b
    else:
        source, subtracted = set_b, set_a

    excluded: set[IdentityKey] = {user.key for user in subtracted}
    return [user for user in source if user.key not in excluded]
