"""Allow running FocusLite as a module: python -m focuslite.

Starts a focus countdown on the Qt event loop and logs every change to
the console until interrupted.
"""

import logging
import signal
import sys

from PyQt6.QtWidgets import QApplication

from .app import FocusLiteApp
from .logging_setup import configure_logging
from .notifier import DesktopNotifier
from .storage.db import APP_SUPPORT_DIR

logger = logging.getLogger("focuslite")


def main() -> None:
    configure_logging(APP_SUPPORT_DIR)

    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("FocusLite")
    qt_app.setOrganizationName("FocusLite")
    qt_app.setQuitOnLastWindowClosed(False)

    app = FocusLiteApp(notifier=DesktopNotifier())
    app.engine.state_changed.connect(
        lambda s: logger.info(
            "%s %s [%s] cycles=%d", s.mode.label, s.formatted_remaining,
            s.status, s.cycles_completed,
        )
    )

    # Ctrl+C quits cleanly
    signal.signal(signal.SIGINT, lambda *_: qt_app.quit())
    qt_app.aboutToQuit.connect(app.engine.shutdown)

    app.engine.start()
    print("FocusLite ready!")
    sys.exit(qt_app.exec())


if __name__ == "__main__":
    main()
