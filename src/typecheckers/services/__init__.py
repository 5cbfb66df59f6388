"""Service layer: document validation used by the CLI."""
