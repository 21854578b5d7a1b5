"""
Provider Resolver - binds one chain provider per process from settings.
"""

import logging

from config import Settings, PROVIDER_REAL, resolve_provider_mode
from .base import ChainProvider
from .daemon import DaemonProvider
from .simulator import SimulatorProvider

logger = logging.getLogger(__name__)


def resolve_provider(settings: Settings) -> ChainProvider:
    """
    Build the provider selected by settings.provider_mode.

    Called once at startup; the result is passed explicitly to the wallet
    service and never swapped afterwards.
    """
    mode = resolve_provider_mode(settings.provider_mode)

    if mode == PROVIDER_REAL:
        provider = DaemonProvider(
            daemon_url=settings.daemon_url,
            timeout=settings.daemon_timeout,
            network=settings.network,
        )
        logger.info(f"Chain provider: {provider.name} ({provider.daemon_url})")
        return provider

    provider = SimulatorProvider(network=settings.network)
    logger.info(f"Chain provider: {provider.name}")
    return provider
