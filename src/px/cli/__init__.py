"""px command-line interface."""
