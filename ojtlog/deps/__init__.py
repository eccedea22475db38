"""FastAPI dependencies: caller identity and per-request service wiring."""
