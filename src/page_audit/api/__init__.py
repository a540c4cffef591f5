"""HTTP API for page audits."""
