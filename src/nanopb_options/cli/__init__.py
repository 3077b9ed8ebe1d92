"""Command-line interface for nanopb_options."""
