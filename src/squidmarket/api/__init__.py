"""HTTP API: routers, dependencies and error envelopes."""
