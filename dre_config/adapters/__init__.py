"""Command-line adapters wiring use cases to the configured backends."""
