"""Output layer: diagnostic messages, sinks, and CLI rendering."""
