"""HTTP API surface: health endpoints, shared dependencies and the v1 router."""
