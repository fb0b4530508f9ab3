"""Read-only marketing analytics (GA4, Search Console, Meta Ads, Google Ads) as MCP tools."""

__version__ = "1.0.0"
