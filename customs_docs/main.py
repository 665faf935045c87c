import uvicorn

from customs_docs.api.app import create_app
from customs_docs.config.settings import Settings
from customs_docs.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> build carrier and pipeline -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
