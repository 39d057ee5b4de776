"""Run the API with uvicorn: ``python -m pagedrop``."""
import uvicorn

from pagedrop.config import settings


def main() -> None:
    uvicorn.run(
        "pagedrop.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    main()
