"""kitchenCOGS HTTP API."""
