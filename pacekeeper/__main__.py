"""Allow running PaceKeeper as a module: python -m pacekeeper."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .log import configure_logging
from .settings import load_settings
from .app import PaceKeeperApp


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    init_db()
    logging.getLogger(__name__).info("PaceKeeper ready")

    app = QApplication(sys.argv)
    app.setApplicationName("PaceKeeper")
    app.setOrganizationName("PaceKeeper")

    window = PaceKeeperApp(settings=settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
