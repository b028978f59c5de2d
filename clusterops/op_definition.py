import re

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from clusterops.exceptions import InvalidArgumentError
from clusterops.types import Action, wire_value

_ID_UNSAFE = re.compile(r'[:#]')


def sanitize_id(value: str) -> str:
    """Make *value* usable as an XML id; ``:`` and ``#`` become ``.``."""
    return _ID_UNSAFE.sub('.', value)


class OperationDefinition(BaseModel):
    """An ``op`` entry of a resource configuration."""
    id: Annotated[str, Field(description='Id of the operation entry')]
    name: Annotated[str, Field(description='Action the entry configures')]
    interval: Annotated[str, Field(description='Interval specification as configured, e.g. 10s')]
    timeout: Annotated[str | None, Field(default=None, description='Timeout specification, if any')]

    def to_attrs(self) -> dict[str, str]:
        attrs = {'id': self.id, 'interval': self.interval, 'name': self.name}
        if self.timeout:
            attrs['timeout'] = self.timeout
        return attrs


def create_op_definition(prefix: str | None, task: str | Action | None, interval_spec: str | None,
                         timeout: str | None = None) -> OperationDefinition:
    task = wire_value(task)
    if not prefix:
        raise InvalidArgumentError('prefix')
    if not task:
        raise InvalidArgumentError('task')
    if not interval_spec:
        raise InvalidArgumentError('interval_spec')
    return OperationDefinition(
        id=sanitize_id(f'{prefix}-{task}-{interval_spec}'),
        name=task,
        interval=interval_spec,
        timeout=timeout,
    )
