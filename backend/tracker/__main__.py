"""Run the API with uvicorn: `python -m tracker`."""

import uvicorn

from .config import settings


def main():
    uvicorn.run("tracker.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
