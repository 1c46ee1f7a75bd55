"""SQLite persistence for the shopping list."""
