"""Command line interface for Chiptheory."""
