"""Configuration: pydantic settings, config discovery, logging."""
