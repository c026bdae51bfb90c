"""CLI command modules, each exposing ``register(app)``."""
