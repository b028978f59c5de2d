"""Whether an action needs resource agent metadata before it can be planned.

Agent metadata tells the scheduler whether a reload is possible and how to
evaluate versioned parameters, so it only matters for classes that take
parameters and for the actions those features touch.
"""

from enum import Flag, auto
from types import MappingProxyType
from typing import Iterable, Mapping

from clusterops.exceptions import InvalidArgumentError
from clusterops.types import Action, wire_value


class RaCap(Flag):
    NONE = 0
    PROVIDER = auto()
    PARAMS = auto()
    UNIQUE = auto()
    PROMOTABLE = auto()
    STDIN = auto()
    FENCE_PARAMS = auto()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> 'RaCap':
        caps = cls.NONE
        for name in names:
            caps |= cls[name.upper()]
        return caps


class RaCapabilityTable:
    """Read-only capability lookup keyed by resource class.

    Class names are matched case-insensitively and unknown classes have no
    capabilities. Built once at startup and shared without locking.
    """

    def __init__(self, caps: Mapping[str, RaCap]):
        self._caps = MappingProxyType({name.lower(): cap for name, cap in caps.items()})

    def caps(self, rsc_class: str) -> RaCap:
        return self._caps.get(rsc_class.lower(), RaCap.NONE)

    def has(self, rsc_class: str, cap: RaCap) -> bool:
        return cap in self.caps(rsc_class)

    @property
    def classes(self) -> list[str]:
        return list(self._caps)

    def __contains__(self, rsc_class: str) -> bool:
        return rsc_class.lower() in self._caps

    def __repr__(self):
        return f'RaCapabilityTable({dict(self._caps)!r})'


DEFAULT_RA_CAPS = RaCapabilityTable({
    'ocf': RaCap.PROVIDER | RaCap.PARAMS | RaCap.UNIQUE | RaCap.PROMOTABLE,
    'stonith': RaCap.PARAMS | RaCap.UNIQUE | RaCap.STDIN | RaCap.FENCE_PARAMS,
    'nagios': RaCap.PARAMS,
    'lsb': RaCap.NONE,
    'service': RaCap.NONE,
    'systemd': RaCap.NONE,
    'upstart': RaCap.NONE,
})

METADATA_ACTIONS = frozenset({
    Action.START.value,
    Action.STATUS.value,
    Action.PROMOTE.value,
    Action.DEMOTE.value,
    Action.RELOAD.value,
    Action.MIGRATE.value,
    Action.MIGRATED.value,
    Action.NOTIFY.value,
})


def needs_metadata(rsc_class: str | None, action: str | Action | None,
                   caps: RaCapabilityTable = DEFAULT_RA_CAPS) -> bool:
    """Check whether an operation requires resource agent metadata.

    Either argument may be None to skip that check, but not both.
    """
    action = wire_value(action)
    if rsc_class is None and action is None:
        raise InvalidArgumentError('rsc_class', 'At least one of rsc_class and action must be given')

    if rsc_class is not None and not caps.has(rsc_class, RaCap.PARAMS):
        return False

    return action in METADATA_ACTIONS
