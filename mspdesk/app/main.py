# mspdesk/app/main.py
import logging

import uvicorn

from .settings import get_settings


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("mspdesk.app.api:app", host=settings.HOST, port=settings.PORT,
                log_level=settings.LOG_LEVEL.lower())


if __name__ == '__main__':
    main()
