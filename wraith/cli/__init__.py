"""CLI module for wraith."""
