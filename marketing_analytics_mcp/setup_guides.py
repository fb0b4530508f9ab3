"""
Setup Guides
============

Markdown walkthroughs returned when a provider is not configured, and the
full guide served by the ``setup_guide`` tool.
"""

from pathlib import Path

from marketing_analytics_mcp.config import AppConfig, ProviderFamily

SETUP_TIP = "*Tip: Call the `setup_guide` tool for the complete setup walkthrough.*"

TOOL_CATALOGUE = [
    "`ga4_list_accounts`, `ga4_run_report`, `ga4_realtime_report`, `ga4_top_pages`, "
    "`ga4_traffic_sources`, `ga4_user_metrics`",
    "`gsc_list_sites`, `gsc_search_analytics`, `gsc_top_queries`, `gsc_top_pages`, "
    "`gsc_inspect_url`, `gsc_list_sitemaps`",
    "`meta_list_ad_accounts`, `meta_account_overview`, `meta_campaign_insights`, "
    "`meta_adset_insights`, `meta_ad_insights`",
    "`gads_query`, `gads_campaign_performance`, `gads_keyword_performance`, "
    "`gads_ad_group_performance`, `gads_account_summary`",
]


def _env_path() -> str:
    return (Path.cwd() / ".env").as_posix()


def google_oauth_setup_guide() -> str:
    return f"""## Google OAuth2 Setup (Required for GA4, Search Console, and Google Ads)

You need a Google Cloud OAuth2 Client ID with a refresh token. Follow these steps:

### Step 1: Create a Google Cloud Project
1. Go to [Google Cloud Console](https://console.cloud.google.com/)
2. Click the project dropdown at the top and select **New Project**
3. Name it something like "Marketing Analytics MCP" and click **Create**
4. Select the new project from the dropdown

### Step 2: Enable APIs
Go to **APIs & Services > Library** and enable:
- [Google Analytics Data API](https://console.cloud.google.com/apis/library/analyticsdata.googleapis.com) for GA4 reporting
- [Google Analytics Admin API](https://console.cloud.google.com/apis/library/analyticsadmin.googleapis.com) for listing GA4 properties
- [Google Search Console API](https://console.cloud.google.com/apis/library/searchconsole.googleapis.com) for search performance data
- [Google Ads API](https://console.cloud.google.com/apis/library/googleads.googleapis.com) (optional, only for Google Ads data)

### Step 3: Configure the OAuth Consent Screen
1. Go to **APIs & Services > OAuth consent screen**
2. Select **External** (or Internal if using Google Workspace)
3. Fill in App name, User support email, and Developer contact email
4. On the Scopes page, add:
   - `https://www.googleapis.com/auth/analytics.readonly`
   - `https://www.googleapis.com/auth/webmasters.readonly`
   - `https://www.googleapis.com/auth/adwords` (if using Google Ads)
5. Add your Google account as a **Test User**
6. Click **Save and Continue** through the remaining steps

### Step 4: Create OAuth Credentials
1. Go to **APIs & Services > Credentials**
2. Click **Create Credentials > OAuth client ID**
3. Application type: **Web application**
4. Under **Authorized redirect URIs**, add: `https://developers.google.com/oauthplayground`
5. Click **Create**
6. Copy your **Client ID** and **Client Secret**

### Step 5: Get Your Refresh Token
1. Open the [OAuth 2.0 Playground](https://developers.google.com/oauthplayground)
2. Click the gear icon, tick **Use your own OAuth credentials** and paste your Client ID and Client Secret
3. Enter the scopes from Step 3 in **Input your own scopes** and click **Authorize APIs**
4. Sign in with the test user and approve access
5. Click **Exchange authorization code for tokens** and copy the **Refresh token**

### Step 6: Set Environment Variables
Add these to a `.env` file (`{_env_path()}`):
```
GOOGLE_CLIENT_ID=your-client-id.apps.googleusercontent.com
GOOGLE_CLIENT_SECRET=your-client-secret
GOOGLE_REFRESH_TOKEN=your-refresh-token
```

Then restart the MCP server for changes to take effect.

**Optional defaults** (can also be selected at runtime via `ga4_list_accounts` / `gsc_list_sites`):
```
GA4_PROPERTY_ID=123456789
GSC_SITE_URL=https://www.example.com
```"""


def meta_ads_setup_guide() -> str:
    return f"""## Meta (Facebook) Ads Setup

You need a Meta access token with `ads_read` permission.

### Option A: Quick Setup (token expires in ~60 days)
1. Go to [Meta Graph API Explorer](https://developers.facebook.com/tools/explorer/)
2. Select your app (or [create one](https://developers.facebook.com/apps/))
3. Click **Generate Access Token**
4. Add the permission: `ads_read`
5. Copy the short-lived token
6. Go to the [Access Token Debugger](https://developers.facebook.com/tools/debug/accesstoken/)
7. Paste your token and click **Debug**
8. Click **Extend Access Token** to get a long-lived token (~60 days)

### Option B: Permanent Token (recommended for production)
1. Go to [Meta Business Manager](https://business.facebook.com/) > **Business Settings > System Users**
2. Create a System User with **Admin** role
3. Generate a token with `ads_read` permission

### Set Environment Variables
Add to `{_env_path()}`:
```
META_ACCESS_TOKEN=your-long-lived-access-token
```

Optional (enables appsecret_proof on every request):
```
META_APP_ID=your-app-id
META_APP_SECRET=your-app-secret
```

Then restart the MCP server for changes to take effect."""


def google_ads_setup_guide() -> str:
    return f"""## Google Ads Setup

Google Ads requires Google OAuth2 credentials **plus** a Developer Token and Customer Account ID.

### Step 1: Get a Developer Token
1. Sign in to [Google Ads](https://ads.google.com)
2. If you don't have a Manager Account, create one at [Google Ads Manager Accounts](https://ads.google.com/home/tools/manager-accounts/)
3. Go to **Tools & Settings > Setup > API Center**
4. Apply for a Developer Token (Basic access is sufficient for read-only)
5. Note: approval may take a few days for new accounts

### Step 2: Find Your Customer Account ID
1. In Google Ads, look at the top-right corner
2. Your Customer ID is the 10-digit number (format: XXX-XXX-XXXX)
3. Dashes are stripped automatically

### Set Environment Variables
Add to `{_env_path()}`:
```
GOOGLE_ADS_DEVELOPER_TOKEN=your-developer-token
GOOGLE_ADS_CUSTOMER_ID=1234567890
```

If accessing client accounts through an MCC manager account, also add:
```
GOOGLE_ADS_LOGIN_CUSTOMER_ID=9876543210
```

Then restart the MCP server for changes to take effect."""


def setup_instructions_for(family: ProviderFamily, config: AppConfig) -> str:
    """
    Instructions shown when a tool of an unconfigured family is called.

    Google Ads also needs Google OAuth2, so when both are missing the
    OAuth2 guide comes first.
    """
    parts = []

    if family == ProviderFamily.GOOGLE:
        parts.append("## Google OAuth2 is not configured\n")
        parts.append("This is needed for **GA4** and **Search Console** tools.\n")
        parts.append(google_oauth_setup_guide())
    elif family == ProviderFamily.META:
        parts.append("## Meta Ads is not configured\n")
        parts.append(meta_ads_setup_guide())
    elif family == ProviderFamily.GOOGLE_ADS:
        parts.append("## Google Ads is not configured\n")
        if config.google is None:
            parts.append(
                "Google Ads requires Google OAuth2, which is also not configured. "
                "Set up Google OAuth2 first:\n"
            )
            parts.append(google_oauth_setup_guide())
            parts.append("\n---\n")
            parts.append("Once Google OAuth2 is configured, also complete the Google Ads setup:\n")
        parts.append(google_ads_setup_guide())
    else:
        raise ValueError(f"Unknown provider family: {family}")

    parts.append("\n\n---\n" + SETUP_TIP)
    return "\n".join(parts)


def full_setup_guide(config: AppConfig) -> str:
    """Live configuration status plus the guides for anything still missing."""
    def status(family: ProviderFamily) -> str:
        return "CONFIGURED" if config.is_configured(family) else "NOT CONFIGURED"

    lines = [
        "# Marketing Analytics MCP - Setup Guide\n",
        "## Current Status",
        f"- Google OAuth2 (GA4 + Search Console): **{status(ProviderFamily.GOOGLE)}**",
        f"- Meta Ads: **{status(ProviderFamily.META)}**",
        f"- Google Ads: **{status(ProviderFamily.GOOGLE_ADS)}**",
        "",
    ]

    if all(config.is_configured(family) for family in ProviderFamily):
        lines.append("All APIs are configured! You're ready to use all tools.")
        lines.append("")
        lines.append("**Available tools:**")
        lines.extend(f"- {group}" for group in TOOL_CATALOGUE)
        return "\n".join(lines)

    lines.append("Follow the guides below for any APIs marked as **NOT CONFIGURED**.\n")
    guides = [
        (ProviderFamily.GOOGLE, google_oauth_setup_guide),
        (ProviderFamily.META, meta_ads_setup_guide),
        (ProviderFamily.GOOGLE_ADS, google_ads_setup_guide),
    ]
    for family, guide in guides:
        if not config.is_configured(family):
            lines.append("---\n")
            lines.append(guide())
            lines.append("")

    return "\n".join(lines)
