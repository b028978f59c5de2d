"""Transition keys and transition magic.

A transition key ties a dispatched action to the transition that asked for it
and to the result the scheduler expects::

    <action_id>:<transition_id>:<target_rc>:<node uuid, 36 columns>

Executors echo the key back with the outcome prepended, the "transition
magic"::

    <op_status>:<actual_rc>;<transition key>

Parsing mirrors the scanf grammar peers use: integers may be signed and
preceded by whitespace, the UUID field is up to 36 non-whitespace characters,
and anything after it is ignored.
"""

import logging
import re

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated

from clusterops.exceptions import InvalidArgumentError, MalformedKeyError
from clusterops.types import OpStatus

logger = logging.getLogger(__name__)

UUID_FIELD_WIDTH = 36

_TRANSITION_KEY_RE = re.compile(
    r'\s*([+-]?\d+):\s*([+-]?\d+):\s*([+-]?\d+):\s*(\S{1,%d})' % UUID_FIELD_WIDTH,
    re.ASCII,
)
_TRANSITION_MAGIC_RE = re.compile(r'\s*([+-]?\d+):\s*([+-]?\d+);\s*(\S+)', re.ASCII)


class TransitionKey(BaseModel):
    action_id: Annotated[int, Field(description='Id of the action within its transition')]
    transition_id: Annotated[int, Field(description='Id of the transition within the scheduler epoch')]
    target_rc: Annotated[int, Field(description='Return code the scheduler expects')]
    node_uuid: Annotated[str, Field(description='Identifier of the node that scheduled the action')]

    model_config = ConfigDict(frozen=True)

    def encode(self) -> str:
        return transition_key(self.transition_id, self.action_id, self.target_rc, self.node_uuid)

    def __str__(self):
        return self.encode()


class TransitionMagic(BaseModel):
    op_status: Annotated[int, Field(description='Execution status reported by the executor')]
    op_rc: Annotated[int, Field(description='Return code reported by the agent')]
    key: Annotated[TransitionKey, Field(description='Transition key the executor echoed back')]

    model_config = ConfigDict(frozen=True)

    @property
    def status(self) -> OpStatus | None:
        return OpStatus.coerce(self.op_status)

    @property
    def uuid(self) -> str:
        return self.key.node_uuid

    @property
    def transition_id(self) -> int:
        return self.key.transition_id

    @property
    def action_id(self) -> int:
        return self.key.action_id

    @property
    def target_rc(self) -> int:
        return self.key.target_rc

    def encode(self) -> str:
        return transition_magic(self.op_status, self.op_rc, self.key.encode())


def transition_key(transition_id: int, action_id: int, target_rc: int, node: str | None) -> str:
    """Generate a transition key.

    The node is written into a fixed 36 column field, padded with spaces or
    cut short. The width is a wire constant, not a check that the node id is
    a UUID.

    The width is counted in characters. Peers count bytes, so a node name
    with non-ASCII characters is padded and cut differently on their side;
    cluster node ids are expected to be ASCII.
    """
    if not node:
        raise InvalidArgumentError('node')
    node_field = node[:UUID_FIELD_WIDTH].ljust(UUID_FIELD_WIDTH)
    return f'{int(action_id)}:{int(transition_id)}:{int(target_rc)}:{node_field}'


def decode_transition_key(key: str | None) -> TransitionKey:
    """Parse a transition key into its constituent parts.

    A UUID field that is not exactly 36 characters wide is logged and kept as
    parsed; some older producers do not honour the width.

    Raises:
        MalformedKeyError: the key does not hold three integers and a UUID.
    """
    if key is None:
        raise MalformedKeyError(key, 'no transition key')
    match = _TRANSITION_KEY_RE.match(key)
    if match is None:
        logger.error("Invalid transition key '%s'", key)
        raise MalformedKeyError(key, 'expected <action>:<transition>:<target_rc>:<uuid>')
    action_id, transition_id, target_rc, uuid = match.groups()
    if len(uuid) != UUID_FIELD_WIDTH:
        logger.warning("Invalid UUID '%s' in transition key '%s'", uuid, key)
    return TransitionKey(
        action_id=int(action_id),
        transition_id=int(transition_id),
        target_rc=int(target_rc),
        node_uuid=uuid,
    )


def transition_magic(op_status: int | OpStatus, op_rc: int, key: str) -> str:
    return f'{int(op_status)}:{int(op_rc)};{key}'


def decode_transition_magic(magic: str | None) -> TransitionMagic:
    """Parse transition magic into the reported outcome and its transition key.

    Raises:
        MalformedKeyError: the status, return code or key is missing, or the
            embedded transition key is itself malformed.
    """
    if not magic:
        logger.error("Could not decode empty transition information")
        raise MalformedKeyError(magic, 'no transition information')
    match = _TRANSITION_MAGIC_RE.match(magic)
    if match is None:
        logger.warning("Transition information '%s' incomplete (3 items expected)", magic)
        raise MalformedKeyError(magic, 'expected <op_status>:<op_rc>;<transition key>')
    op_status, op_rc, key = match.groups()
    return TransitionMagic(
        op_status=int(op_status),
        op_rc=int(op_rc),
        key=decode_transition_key(key),
    )
