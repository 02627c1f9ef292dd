"""CLI package for posledger."""
