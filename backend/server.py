from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load .env from backend dir before settings are read
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))

from app.config import get_host, get_log_level, get_port  # noqa: E402

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main() -> None:
    host, port = get_host(), get_port()
    logging.info("[server] Tabletop session relay listening on http://%s:%d", host, port)
    uvicorn.run("app.main:app", host=host, port=port, log_level=get_log_level().lower())


if __name__ == "__main__":
    main()
