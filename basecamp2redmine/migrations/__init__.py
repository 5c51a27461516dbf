"""Migration components, one per Basecamp entity type."""
