"""HTTP API for stored layouts."""
