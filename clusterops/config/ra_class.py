from pydantic import BaseModel, Field
from typing_extensions import Annotated, Literal

from clusterops.metadata import RaCap

RaCapName = Literal['provider', 'params', 'unique', 'promotable', 'stdin', 'fence_params']


class ResourceClassConfig(BaseModel):
    capabilities: Annotated[list[RaCapName], Field(default_factory=lambda: [], description='Capabilities of agents of this class')]
    description: Annotated[str | None, Field(default=None, description='Description of the resource class')]

    def caps(self) -> RaCap:
        return RaCap.from_names(self.capabilities)

