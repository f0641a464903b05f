"""HTTP clients for remote APIs."""
