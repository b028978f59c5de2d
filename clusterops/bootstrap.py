import logging

from clusterops.config.cluster_ops import ClusterOpsConfig, load_config
from clusterops.metadata import RaCapabilityTable

logger = logging.getLogger(__name__)


def configure_logging(verbosity: int | None):
    if not verbosity:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level)


def initialize(config_path: str | None = None, verbosity: int | None = 0) -> RaCapabilityTable:
    """Set up logging and build the capability table for this process.

    Without a config file the built-in resource classes are used. The returned
    table is meant to be created once and handed to every metadata decision.
    """
    configure_logging(verbosity)
    if config_path:
        config = load_config(config_path)
    else:
        config = ClusterOpsConfig()
    table = config.capability_table()
    logger.info(f"Resource classes: {', '.join(sorted(table.classes))}")
    return table
