"""Module defining various global constants."""

# rclone-manager version
VERSION = "1.0.0"

# Special exit code for when rclone-manager itself fails unexpectedly.
MANAGER_ERROR_CODE = 254

# Exit code for expected failures like a missing config file or invalid input.
FAILURE_CODE = 1

# Location of the rclone config file relative to the home directory.
DEFAULT_CONFIG_PATH = "~/.config/rclone/rclone.conf"

# Location of the settings file of rclone-manager itself.
DEFAULT_SETTINGS_PATH = "~/.config/rclone-manager/config"

# Directory under which every remote gets its own mount point.
DEFAULT_MOUNT_ROOT = "~/mnt"

# Cache mode passed to `rclone mount`. Also part of the crontab entries, so changing
# it means that previously scheduled remotes are no longer recognized.
DEFAULT_VFS_CACHE_MODE = "writes"

# Seconds to wait for external tools like rclone, crontab and mountpoint.
DEFAULT_TIMEOUT = 10

# Name of the descriptor file in each plugin directory.
PLUGIN_DESCRIPTOR = "config.json"

# Submission key that names the new remote rather than being written as a setting.
REMOTE_NAME_KEY = "remote_name"
