# src/httpwrap/api/main.py
from __future__ import annotations

# Export the real application created in app.py (wrapped FastAPI app).
from httpwrap.api.app import app  # noqa: F401
from httpwrap.api.config import load_config


def run() -> None:
    """
    Optional programmatic runner:
    python -m httpwrap.api.main
    """
    import uvicorn  # local import to keep import graph light

    cfg = load_config()

    # access lines come from the wrapping handler; uvicorn's own would duplicate them
    uvicorn.run("httpwrap.api.main:app", host=cfg.host, port=cfg.port, reload=False, access_log=False)


if __name__ == "__main__":
    run()
