"""
Entry point for the sweep-line intersection service.

Running this script with ``python run.py`` starts the FastAPI server
that exposes the intersection API.  The application defined in
``backend/sweepline/main.py`` is imported after adjusting the Python
path to include the ``backend`` directory.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import logging
import uvicorn

logging.basicConfig(
    level=logging.DEBUG if os.getenv("SWEEP_DEBUG") else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> None:
    """Run the Uvicorn server hosting the intersection service."""
    # Ensure ``sweepline`` is importable when running from a source checkout.
    backend_dir = Path(__file__).resolve().parent / "backend"
    if str(backend_dir) not in sys.path:
        sys.path.append(str(backend_dir))

    # Import inside main() to avoid modifying sys.path at module import time.
    from sweepline.main import app  # type: ignore

    host = os.getenv("SWEEP_HOST", "0.0.0.0")
    port = int(os.getenv("SWEEP_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
