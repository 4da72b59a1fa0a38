"""blueprints — HTTP surface."""
