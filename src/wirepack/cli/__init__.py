"""Command line interface for wirepack."""
