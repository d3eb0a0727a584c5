"""Built-in plugins shipped with domain-access."""
