"""HTTP API for the armory ledger."""
