"""Core - metadata registry, transformers, configuration and errors."""
