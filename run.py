import logging
import sys

import uvicorn
from pydantic import ValidationError

from vaev.config import get_settings

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings = get_settings()
    except ValidationError as exc:
        logging.getLogger("vaev").error("Invalid configuration: %s", exc)
        sys.exit(1)

    # Start the API server
    print(f"Starting Vaev on {settings.API_HOST}:{settings.API_PORT}...")
    uvicorn.run(
        "vaev.main:create_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD,
    )
