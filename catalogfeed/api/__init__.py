"""HTTP API layer - Routers, schemas, dependencies and middleware."""
