"""tasktrack entrypoint.

Run with:
  python -m tasktrack
"""

import uvicorn

from tasktrack.config import load_settings
from tasktrack.logging_config import get_logging_config


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        "tasktrack.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=get_logging_config(settings.log_level),
    )


if __name__ == "__main__":
    main()
