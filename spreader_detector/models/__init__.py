"""Models module - infection propagation."""
