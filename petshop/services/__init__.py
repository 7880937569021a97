"""Services package - External service integrations."""
