"""FastAPI surface for the workflow graph engine."""
