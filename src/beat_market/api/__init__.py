"""HTTP API for the Beat Market application."""
