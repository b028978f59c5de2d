"""Closed enumerations shared with the executor layer.

Values are wire constants: the action names travel inside operation keys and
the status numbers travel inside transition magic, so neither may be renamed
or renumbered independently of the peers that produce them.
"""

from enum import Enum, IntEnum


class Action(str, Enum):
    START = 'start'
    STOP = 'stop'
    STATUS = 'monitor'
    PROMOTE = 'promote'
    DEMOTE = 'demote'
    RELOAD = 'reload'
    MIGRATE = 'migrate_to'
    MIGRATED = 'migrate_from'
    NOTIFY = 'notify'
    NOTIFIED = 'notified'
    CANCEL = 'cancel'
    DELETE = 'delete'
    METADATA = 'meta-data'
    VALIDATE = 'validate-all'
    FENCE = 'stonith'
    OFF = 'off'
    ON = 'on'


class OpStatus(IntEnum):
    UNKNOWN = -2
    PENDING = -1
    DONE = 0
    CANCELLED = 1
    TIMEOUT = 2
    NOTSUPPORTED = 3
    ERROR = 4
    ERROR_HARD = 5
    ERROR_FATAL = 6
    NOT_INSTALLED = 7
    NOT_CONNECTED = 8
    INVALID = 9

    @classmethod
    def coerce(cls, value: 'int | OpStatus') -> 'OpStatus | None':
        """Return the member for a raw status number, or None if it is not one."""
        try:
            return cls(value)
        except ValueError:
            return None


class NotifyType(str, Enum):
    PRE = 'pre'
    POST = 'post'


def wire_value(value: 'str | Enum | None') -> str | None:
    """Return the wire text of an enum member, passing plain strings through."""
    if isinstance(value, Enum):
        return value.value
    return value
