"""Third-party integrations for the What To Cook API."""
