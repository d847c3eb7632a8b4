"""Menu, role and UI element permission administration API."""
