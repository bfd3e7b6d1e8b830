"""Completion notifications: an audible cue plus a desktop alert.

Both calls are best effort.  A failure is logged as a
:class:`~focuslite.errors.NotificationFailure` and never reaches the
timer.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import QSystemTrayIcon

from .errors import NotificationFailure

if TYPE_CHECKING:
    from .audio.sounds import SoundManager

logger = logging.getLogger(__name__)

ALERT_TITLE = "FocusLite"


class NotifierPort(Protocol):
    def play_sound(self) -> None: ...

    def show_alert(self, title: str, body: str) -> None: ...


class NullNotifier:
    """Notifier that does nothing (headless runs)."""

    def play_sound(self) -> None:
        pass

    def show_alert(self, title: str, body: str) -> None:
        pass


class DesktopNotifier:
    """Plays the synthesized chime and shows a tray-icon message.

    Needs a ``QApplication``.  When the system tray is missing the alert
    is only logged.
    """

    def __init__(
        self,
        *,
        sound_manager: SoundManager | None = None,
        sounds_dir: Path | None = None,
        tray_icon: QSystemTrayIcon | None = None,
    ) -> None:
        if sound_manager is None:
            # QtMultimedia is only loaded when a real notifier is built
            from .audio.sounds import SoundManager

            sound_manager = SoundManager(sounds_dir=sounds_dir)
        self._sounds = sound_manager
        self._tray = tray_icon
        if self._tray is None and QSystemTrayIcon.isSystemTrayAvailable():
            self._tray = QSystemTrayIcon(QIcon())
            self._tray.show()

    def play_sound(self) -> None:
        try:
            if not self._sounds.play():
                raise NotificationFailure("completion sound is disabled or not loaded")
        except NotificationFailure as exc:
            logger.warning("Sound not played: %s", exc)
        except RuntimeError as exc:
            # wrapped C++ object already deleted
            logger.warning("Sound not played: %s", NotificationFailure(str(exc)))

    def show_alert(self, title: str, body: str) -> None:
        try:
            if self._tray is None:
                raise NotificationFailure("system tray unavailable")
            self._tray.showMessage(title, body)
        except NotificationFailure as exc:
            logger.info("Alert %r not shown (%s): %s", title, exc, body)
        except RuntimeError as exc:
            logger.warning("Alert not shown: %s", NotificationFailure(str(exc)))
