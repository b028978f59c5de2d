"""Classification of operation results reported by executors."""

import logging
from enum import Enum

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from clusterops.exceptions import MalformedKeyError
from clusterops.op_key import MAX_INTERVAL_MS, op_key
from clusterops.transition import TransitionKey, decode_transition_key
from clusterops.types import OpStatus

logger = logging.getLogger(__name__)


class OpVerdict(str, Enum):
    FAILED = 'failed'
    PENDING = 'pending'
    CANCELLED = 'cancelled'
    OK = 'ok'


# Statuses that fail the operation whatever the agent returned.
FAILED_STATUSES = frozenset({
    OpStatus.NOTSUPPORTED,
    OpStatus.TIMEOUT,
    OpStatus.ERROR,
    OpStatus.NOT_CONNECTED,
    OpStatus.INVALID,
})


def classify(op_status: int | OpStatus, actual_rc: int, target_rc: int) -> OpVerdict:
    """Map a reported status and return code to a verdict.

    Pending and cancelled operations are never failures. Any status not listed
    in FAILED_STATUSES, unknown numbers included, is judged on the return
    code alone.
    """
    status = OpStatus.coerce(op_status)
    if status is OpStatus.PENDING:
        return OpVerdict.PENDING
    if status is OpStatus.CANCELLED:
        return OpVerdict.CANCELLED
    if status in FAILED_STATUSES:
        return OpVerdict.FAILED
    if actual_rc != target_rc:
        return OpVerdict.FAILED
    return OpVerdict.OK


def is_failed(op_status: int | OpStatus, actual_rc: int, target_rc: int) -> bool:
    return classify(op_status, actual_rc, target_rc) is OpVerdict.FAILED


def expected_rc(user_data: str | None) -> int:
    """Return the target rc of the transition key in user_data, or 0 without one."""
    if not user_data:
        return 0
    try:
        return decode_transition_key(user_data).target_rc
    except MalformedKeyError:
        return 0


class ExecutorEvent(BaseModel):
    """A result report as relayed from an executor."""
    rsc_id: Annotated[str, Field(min_length=1, description='Id of the resource the operation ran on')]
    op_type: Annotated[str, Field(min_length=1, description='Action that was executed')]
    interval_ms: Annotated[int, Field(default=0, ge=0, le=MAX_INTERVAL_MS)]
    op_status: Annotated[int, Field(default=OpStatus.DONE.value, description='Execution status')]
    rc: Annotated[int, Field(default=0, description='Return code reported by the agent')]
    user_data: Annotated[str | None, Field(default=None, description='Transition key attached at dispatch')]
    exec_time_ms: Annotated[int | None, Field(default=None)]
    queue_time_ms: Annotated[int | None, Field(default=None)]

    @property
    def status(self) -> OpStatus | None:
        return OpStatus.coerce(self.op_status)

    def op_key(self) -> str:
        return op_key(self.rsc_id, self.op_type, self.interval_ms)

    def transition(self) -> TransitionKey | None:
        if not self.user_data:
            return None
        try:
            return decode_transition_key(self.user_data)
        except MalformedKeyError:
            logger.warning(
                "Result of %s %s (interval %dms) carries an unusable transition key",
                self.rsc_id, self.op_type, self.interval_ms,
            )
            return None

    def expected_rc(self) -> int:
        return expected_rc(self.user_data)

    def verdict(self, target_rc: int | None = None) -> OpVerdict:
        if target_rc is None:
            target_rc = self.expected_rc()
        return classify(self.op_status, self.rc, target_rc)

    def did_fail(self, target_rc: int | None = None) -> bool:
        return self.verdict(target_rc) is OpVerdict.FAILED
