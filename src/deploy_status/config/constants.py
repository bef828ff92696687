"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "deploy-status"
APP_AUTHOR = "deploy-status"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"
CREDENTIALS_FILE = CONFIG_DIR / "credentials.toml"

# Environment variable names
ENV_CONFIG_FILE = "DEPLOY_STATUS_CONFIG"
ENV_TOKEN = "DEPLOY_STATUS_TOKEN"

# API defaults
VERCEL_API_BASE = "https://api.vercel.com"
NETLIFY_API_BASE = "https://api.netlify.com/api/v1"
VERCEL_DASHBOARD = "https://vercel.com/~"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
VERCEL_PROJECT_PAGE_SIZE = 100

# Deployments kept per project
DEFAULT_DEPLOYMENTS_PER_PROJECT = 5

# Polling intervals (seconds)
DEFAULT_ACTIVE_INTERVAL = 10.0
DEFAULT_RECENT_INTERVAL = 30.0
DEFAULT_IDLE_INTERVAL = 300.0
# How long a detected status change keeps the scheduler in the recent regime
DEFAULT_RECENT_CHANGE_WINDOW = 180.0

# Trailing window deciding whether a project counts toward the overall status
DEFAULT_ACTIVE_WINDOW = 3600.0

DEFAULT_MAX_CONCURRENCY = 8
