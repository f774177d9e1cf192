"""AI sprint planning."""
