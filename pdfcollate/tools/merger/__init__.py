"""Discovery and merge plugins."""
