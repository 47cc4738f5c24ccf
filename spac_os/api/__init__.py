"""HTTP API for the SPAC OS rule engine."""
