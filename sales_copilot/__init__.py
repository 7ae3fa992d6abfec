"""Sales Copilot: structured sales-call script generation service."""
