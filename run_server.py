"""Run the Daggerboard API server."""

import uvicorn

from daggerboard.config import Config

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host="127.0.0.1",
        port=8000,
        reload=Config.DEBUG,
        log_level=Config.LOG_LEVEL.lower(),
    )
