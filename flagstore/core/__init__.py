"""Configuration, logging and errors shared across the flag store."""
