"""Run the server: python -m cereal_box"""

import uvicorn

from cereal_box.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "cereal_box.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
