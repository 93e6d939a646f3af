"""
Bank scoping policy.

Every admin write goes through one of the functions below before the
store is touched. They are pure: they only compare bank ids and return a
Decision, callers turn a denial into an AuthorizationDenied with
``enforce``.
"""
import logging
from collections import namedtuple

from bloodbank.errors import AuthorizationDenied

logger = logging.getLogger(__name__)

# Reason codes
OWNER_OTHER_BANK = 'owner_other_bank'
HANDLER_OTHER_BANK = 'handler_other_bank'
TARGET_OTHER_BANK = 'target_other_bank'
ENTITY_OTHER_BANK = 'entity_other_bank'
REASSIGN_OTHER_BANK = 'reassign_other_bank'

MESSAGES = {
    OWNER_OTHER_BANK: 'The donor or recipient does not belong to your bank.',
    HANDLER_OTHER_BANK: 'The handling admin does not belong to your bank.',
    TARGET_OTHER_BANK: 'You can only add records to your own bank.',
    ENTITY_OTHER_BANK: 'You can only modify records that belong to your own bank.',
    REASSIGN_OTHER_BANK: 'Records cannot be moved to another bank.',
}


class Decision(namedtuple('Decision', ['permitted', 'reason'])):

    def __bool__(self):
        return self.permitted

    @property
    def message(self):
        return MESSAGES.get(self.reason)


PERMIT = Decision(True, None)


def deny(reason):
    return Decision(False, reason)


def can_create(actor_bank_id, owner_bank_id, handler_bank_id, target_bank_id):
    """Tri-party match for new donations and requests.

    ``owner`` is the donor/recipient the row refers to, ``handler`` the
    admin recorded as collector/fulfiller and ``target`` the bank id set on
    the new row. All of them must be the acting admin's bank.
    """
    if owner_bank_id != actor_bank_id:
        return deny(OWNER_OTHER_BANK)
    if handler_bank_id != actor_bank_id:
        return deny(HANDLER_OTHER_BANK)
    if target_bank_id != actor_bank_id:
        return deny(TARGET_OTHER_BANK)
    return PERMIT


def can_add(actor_bank_id, target_bank_id):
    """New rows that only carry a bank id, such as admin accounts"""
    if target_bank_id != actor_bank_id:
        return deny(TARGET_OTHER_BANK)
    return PERMIT


def can_modify(actor_bank_id, entity_bank_id, new_bank_id=None):
    """Update/delete rule, ``new_bank_id`` is only given when the bank changes"""
    if entity_bank_id != actor_bank_id:
        return deny(ENTITY_OTHER_BANK)
    if new_bank_id is not None and new_bank_id != actor_bank_id:
        return deny(REASSIGN_OTHER_BANK)
    return PERMIT


def is_editable(actor_bank_id, entity_bank_id):
    return bool(can_modify(actor_bank_id, entity_bank_id))


def enforce(decision, actor=None, target=None):
    if not decision:
        logger.warning('Write denied for %r on %r: %s', actor, target, decision.reason)
        raise AuthorizationDenied(decision.reason, decision.message)
    return decision
