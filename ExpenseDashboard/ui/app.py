"""Application setup utilities and custom QApplication for ExpenseDashboard.

This module provides:
    - set_model_id: set Windows AppUserModelID for custom window icons on Windows
    - Application: subclass of QApplication configuring application metadata and theme
"""
import ctypes
import sys
import uuid
from typing import Optional, Sequence

from PySide6 import QtCore, QtWidgets


def set_model_id() -> None:
    """Set windows model id to add custom window icons on windows.
    https://github.com/cztomczak/cefpython/issues/395
    """
    if QtCore.QSysInfo().productType() in ('windows', 'winrt'):
        hresult = ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(
            f'ExpenseDashboard-{uuid.uuid4()}'.encode('utf-8')
        )
        if hresult != 0:
            raise RuntimeError(f'SetCurrentProcessExplicitAppUserModelID failed with code {hresult}')


class Application(QtWidgets.QApplication):
    """Custom QApplication setting the application metadata, Windows model ID and theme."""

    def __init__(self, argv: Optional[Sequence[str]] = None) -> None:
        if argv is None:
            argv = sys.argv

        super().__init__(list(argv))

        from .. import __version__
        from ..settings import lib
        self.setApplicationName(lib.app_name)
        self.setOrganizationName('')
        self.setApplicationVersion(__version__)
        self.setQuitOnLastWindowClosed(True)

        set_model_id()

        from . import ui
        ui.apply_theme()
