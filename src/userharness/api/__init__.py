"""HTTP surface of the harness."""
