"""Manage rclone remotes: list, mount, schedule at boot and add them from plugins."""
