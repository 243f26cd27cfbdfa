"""CLI entrypoints for version_watch."""
