APP_NAME = "devssh"

DEFAULT_BASE_PORT = 2222
MAX_PORT = 65535

# Workspaces are reached through a local tunnel
DEFAULT_SSH_HOSTNAME = "0.0.0.0"
DEFAULT_SSH_USER = "devssh"

PRIVATE_KEY_FILENAME = "devssh.pem"
CONFIG_FILENAME = "config.json"
WORKSPACE_CACHE_FILENAME = "workspace_cache.json"
BACKUP_SUFFIX = "bak"
