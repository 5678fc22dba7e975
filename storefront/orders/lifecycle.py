"""
Order status state machine.

Every (from, to) pair of statuses is a permitted transition. The table maps
each pair to the inventory effect it carries:

    anything -> cancelled      release (stock goes back)
    cancelled -> anything else reserve (stock is taken again, guarded)
    everything else            no stock effect
"""
from .models import ORDER_STATUS_CHOICES

ORDER_STATUSES = [value for value, _ in ORDER_STATUS_CHOICES]
CANCELLED = 'cancelled'

RELEASE = 'release'
RESERVE = 'reserve'


def _effect(current, target):
    if current == target:
        return None
    if target == CANCELLED:
        return RELEASE
    if current == CANCELLED:
        return RESERVE
    return None


TRANSITIONS = {
    (current, target): _effect(current, target)
    for current in ORDER_STATUSES
    for target in ORDER_STATUSES
}


def transition_effect(current, target):
    """Inventory effect of moving from current to target; KeyError for unknown statuses"""
    return TRANSITIONS[(current, target)]
