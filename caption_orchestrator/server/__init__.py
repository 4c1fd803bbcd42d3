"""HTTP API for caption generation (FastAPI app in app.py, schemas in models.py)."""
