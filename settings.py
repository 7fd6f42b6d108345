from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Server configuration
PORT = config.get("PORT", 8080)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "127.0.0.1")

# Application identity shown on the consent summary
APP_NAME = config.get("APP_NAME", "Sentinel")
DEVELOPER_NAME = config.get("DEVELOPER_NAME", "Sentinel")

# GitHub OAuth configuration
# The client id and redirect uri are public; the secret is only read by the
# token exchange proxy and never rendered into any page.
GITHUB_CLIENT_ID = config.get("GITHUB_CLIENT_ID", "")
GITHUB_CLIENT_SECRET = config.get("GITHUB_CLIENT_SECRET", "")
# Left empty, both are derived from the port the server listens on
GITHUB_REDIRECT_URI = config.get("GITHUB_REDIRECT_URI", "")
OAUTH_PROXY_URL = config.get("OAUTH_PROXY_URL", "")

# Repository access and read-only profile, in this order
SCOPES = ["repo", "read:user"]

# GitHub endpoints (hardcoded - not user configurable)
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_API_BASE = "https://api.github.com"

# Timeout for token exchange and GitHub API calls, in seconds
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 10.0)

# Credential storage
CREDENTIALS_FILE = config.get_path("CREDENTIALS_FILE", "~/.sentinel-oauth/credentials.json")
