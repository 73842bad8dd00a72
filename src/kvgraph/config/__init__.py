"""Configuration: section models, TOML discovery, settings, and logging."""
