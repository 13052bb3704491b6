"""Core page model and site compilation steps."""
