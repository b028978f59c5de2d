"""Operation keys: ``<resource_id>_<action>_<interval_ms>``.

The key is the primary identity of an operation everywhere in the cluster, so
the grammar is fixed. Parsing scans from the right: the trailing digit run is
always the interval and the field before it is always the action, which lets
resource ids contain the delimiter themselves.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated

from clusterops.exceptions import InvalidArgumentError, MalformedKeyError
from clusterops.types import Action, NotifyType, wire_value

logger = logging.getLogger(__name__)

# Largest interval a peer can represent (unsigned 32 bit milliseconds).
MAX_INTERVAL_MS = 2 ** 32 - 1

KEY_DELIMITER = '_'

# Checked in this order; each is stripped only as an exact trailing match.
NOTIFY_MARKERS = ('_post_notify', '_pre_notify')

_DIGITS = frozenset('0123456789')


class OperationKey(BaseModel):
    resource_id: Annotated[str, Field(description='Id of the resource the operation runs on')]
    action: Annotated[str, Field(description='Name of the action, e.g. start or monitor')]
    interval_ms: Annotated[int, Field(ge=0, le=MAX_INTERVAL_MS, description='Recurrence interval, 0 for one-shot operations')]

    model_config = ConfigDict(frozen=True)

    @property
    def is_recurring(self) -> bool:
        return self.interval_ms != 0

    def encode(self) -> str:
        return op_key(self.resource_id, self.action, self.interval_ms)

    @classmethod
    def decode(cls, key: str | None) -> 'OperationKey':
        return parse_op_key(key)

    def __str__(self):
        return self.encode()


def op_key(resource_id: str | None, action: str | Action | None, interval_ms: int) -> str:
    """Generate an operation key (RESOURCE_ACTION_INTERVAL).

    Raises:
        InvalidArgumentError: resource_id or action is missing, or interval_ms
            is outside 0..MAX_INTERVAL_MS.
    """
    action = wire_value(action)
    if not resource_id:
        raise InvalidArgumentError('resource_id')
    if not action:
        raise InvalidArgumentError('action')
    if interval_ms is None or interval_ms < 0 or interval_ms > MAX_INTERVAL_MS:
        raise InvalidArgumentError(
            'interval_ms',
            f"Argument 'interval_ms' must be between 0 and {MAX_INTERVAL_MS}, got {interval_ms}",
        )
    return f'{resource_id}{KEY_DELIMITER}{action}{KEY_DELIMITER}{int(interval_ms)}'


def parse_op_key(key: str | None) -> OperationKey:
    """Split an operation key back into resource id, action and interval.

    A ``_pre_notify`` or ``_post_notify`` marker left at the end of the
    resource part is removed, so notification keys decode to the resource
    they notify about.

    Raises:
        MalformedKeyError: the key is empty, has no trailing interval, or the
            interval and action fields are not each preceded by ``_``.
    """
    if not key:
        logger.error("Can not parse an empty operation key")
        raise MalformedKeyError(key, 'empty key')

    # Interval: maximal digit run at the end, never including the first character
    offset = len(key) - 1
    interval_ms = 0
    weight = 1
    while offset > 0 and key[offset] in _DIGITS:
        interval_ms += int(key[offset]) * weight
        weight *= 10
        offset -= 1
    logger.debug("Operation key '%s' has interval %dms", key, interval_ms)

    if offset == len(key) - 1 or key[offset] != KEY_DELIMITER:
        logger.error("Operation key '%s' has no interval field", key)
        raise MalformedKeyError(key, 'no trailing interval')
    if interval_ms > MAX_INTERVAL_MS:
        logger.error("Operation key '%s' has an interval beyond %d", key, MAX_INTERVAL_MS)
        raise MalformedKeyError(key, 'interval out of range')

    action_end = offset
    offset -= 1
    while offset > 0 and key[offset] != KEY_DELIMITER:
        offset -= 1
    if offset < 0 or key[offset] != KEY_DELIMITER:
        logger.error("Operation key '%s' has no action field", key)
        raise MalformedKeyError(key, 'no action field')

    action = key[offset + 1:action_end]
    logger.debug("  Action: %s", action)

    resource_id = key[:offset]
    for marker in NOTIFY_MARKERS:
        found = resource_id.find(marker)
        if found >= 0 and resource_id[found:] == marker:
            resource_id = resource_id[:found]
    logger.debug("  Resource: %s", resource_id)

    return OperationKey(resource_id=resource_id, action=action, interval_ms=interval_ms)


def notify_key(resource_id: str | None, notify_type: str | NotifyType | None, op_type: str | Action | None) -> str:
    """Generate the key of a notification: ``<rsc>_<pre|post>_notify_<op>_0``."""
    notify_type = wire_value(notify_type)
    op_type = wire_value(op_type)
    if not resource_id:
        raise InvalidArgumentError('resource_id')
    if not notify_type:
        raise InvalidArgumentError('notify_type')
    if not op_type:
        raise InvalidArgumentError('op_type')
    return f'{resource_id}_{notify_type}_notify_{op_type}_0'
