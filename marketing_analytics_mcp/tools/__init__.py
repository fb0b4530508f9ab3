"""Tool registration, one module per provider."""
from ..auth import ProviderClients
from ..coordinator import ToolRegistry
from .ga4 import register_ga4_tools
from .google_ads import register_google_ads_tools
from .gsc import register_gsc_tools
from .meta import register_meta_tools
from .setup import register_setup_tools


def register_all_tools(registry: ToolRegistry, clients: ProviderClients) -> ToolRegistry:
    """Register every tool family plus setup_guide"""
    register_ga4_tools(registry, clients)
    register_gsc_tools(registry, clients)
    register_meta_tools(registry, clients)
    register_google_ads_tools(registry, clients)
    register_setup_tools(registry)
    return registry


__all__ = [
    "register_all_tools",
    "register_ga4_tools",
    "register_google_ads_tools",
    "register_gsc_tools",
    "register_meta_tools",
    "register_setup_tools",
]
