"""
Run FastAPI HTTP Server

Starts the mentor booking API.
"""

import os
import uvicorn
from mentor_booking.config import get_config

if __name__ == "__main__":
    config = get_config()

    # Hosting platforms provide PORT; otherwise fall back to config
    port = int(os.environ.get("PORT", config.server.port))
    host = os.environ.get("HOST", config.server.host)

    uvicorn.run(
        "mentor_booking.main:app",
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
