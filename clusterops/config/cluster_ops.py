import logging

from pyaml_env import parse_config as parse_config_with_env
from pydantic import BaseModel, Field, ValidationError
from typing_extensions import Annotated

from clusterops.config.ra_class import ResourceClassConfig
from clusterops.exceptions import ConfigError, ConfigNotFoundError
from clusterops.metadata import DEFAULT_RA_CAPS, RaCapabilityTable

logger = logging.getLogger(__name__)


class ClusterOpsConfig(BaseModel):
    resource_classes: Annotated[dict[str, ResourceClassConfig], Field(default_factory=dict, description='Resource classes and their capabilities')]
    inherit_default_classes: Annotated[bool, Field(default=True, description='Whether the built-in resource classes are kept next to the configured ones')]

    def capability_table(self) -> RaCapabilityTable:
        caps = {}
        if self.inherit_default_classes:
            caps.update({name: DEFAULT_RA_CAPS.caps(name) for name in DEFAULT_RA_CAPS.classes})
        caps.update({name: cls_config.caps() for name, cls_config in self.resource_classes.items()})
        return RaCapabilityTable(caps)


def load_config(config_path: str) -> ClusterOpsConfig:
    """Load a YAML config file, substituting ``${VAR}`` environment references."""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw = parse_config_with_env(data=f, tag=None)
    except FileNotFoundError as e:
        raise ConfigNotFoundError(config_path) from e
    except OSError as e:
        raise ConfigError(f"Can not read config file '{config_path}': {e}") from e
    try:
        config = ClusterOpsConfig.model_validate(raw or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid config file '{config_path}': {e}") from e
    logger.debug(f"Loaded config: {config}")
    return config
