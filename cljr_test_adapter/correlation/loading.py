"""Build the correlator chain from strategies registered as entry points."""

import logging
from collections.abc import Mapping
from importlib.metadata import EntryPoint, entry_points

from cljr_test_adapter.config import AdapterConfig
from cljr_test_adapter.correlation.base import CorrelationStrategy, Correlator
from cljr_test_adapter.errors import CorrelatorNotFoundError

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "cljr_test_adapter.correlators"


def registered_correlators() -> Mapping[str, EntryPoint]:
    """Return the registered correlation strategies by key."""
    return {entry.name: entry for entry in entry_points(group=ENTRY_POINT_GROUP)}


def build_correlator(config: AdapterConfig) -> Correlator:
    """Build a correlator from the configured strategy keys, in order.

    Each key is looked up once; the same key listed twice yields two
    strategy instances.

    Raises:
        CorrelatorNotFoundError: If a configured key is not registered

    """
    registered = registered_correlators()
    strategies: list[CorrelationStrategy] = []

    for key in config.correlators:
        if (entry := registered.get(key)) is None:
            raise CorrelatorNotFoundError(
                f"Correlator '{key}' not found. "
                f"Available correlators: {sorted(registered)}"
            )
        strategy_cls: type[CorrelationStrategy] = entry.load()
        strategies.append(strategy_cls.from_config(config))

    log.debug("Correlation strategies: %s", [s.name for s in strategies])
    return Correlator(strategies=strategies)
