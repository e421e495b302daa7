"""Command line interface for release-drafter."""
