"""Core domain logic for the What To Cook API."""
