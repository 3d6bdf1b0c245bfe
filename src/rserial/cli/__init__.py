"""Command line interface for rserial."""
