"""Task store, share ledger, sharing orchestrator and response cache."""
