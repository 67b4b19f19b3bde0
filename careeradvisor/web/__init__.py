"""Web front end (FastAPI + Jinja2 templates)."""
