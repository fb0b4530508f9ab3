"""The always-available setup_guide tool."""
from ..coordinator import ToolRegistry
from ..responses import ToolResponse, text_response
from ..setup_guides import full_setup_guide


def register_setup_tools(registry: ToolRegistry) -> None:
    @registry.tool(
        "setup_guide",
        "Show which analytics APIs are configured and step-by-step instructions for setting up "
        "any that are missing (Google OAuth2 for GA4 + Search Console, Meta Ads, Google Ads).",
    )
    async def setup_guide() -> ToolResponse:
        return text_response(full_setup_guide(registry.config))
