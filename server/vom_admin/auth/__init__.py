"""Role registry, permission matrix and session dependencies."""
