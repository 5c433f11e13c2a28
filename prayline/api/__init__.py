"""HTTP access to the upstream prayer times API."""
