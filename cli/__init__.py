"""Command line interface for onlineprop."""
