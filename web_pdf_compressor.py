import logging

import uvicorn

from pdf_compressor.logging_setup import setup_logging
from pdf_compressor.settings import Settings
from web.app import create_app


def main() -> None:
    settings = Settings.from_env()

    setup_logging(settings)

    log = logging.getLogger("pdf_compressor.main")

    app = create_app(settings)

    log.info("Web app starting on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
