"""User confirmation and notification.

This module provides:
    - Prompter: the interface the dashboard uses to ask and tell the user things
    - MessageBoxPrompter: implementation showing modal QMessageBox dialogs
"""
import logging
from typing import Optional

from PySide6 import QtWidgets


class Prompter:
    """Asks the user for confirmation and shows success and error messages."""

    def confirm(self, title: str, text: str) -> bool:
        """Ask a yes/no question. Returns True when the user accepts."""
        raise NotImplementedError

    def notify(self, title: str, text: str) -> None:
        """Show a success message."""
        raise NotImplementedError

    def warn(self, title: str, text: str) -> None:
        """Show an error message."""
        raise NotImplementedError


class MessageBoxPrompter(Prompter):
    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        self._parent = parent

    def confirm(self, title: str, text: str) -> bool:
        res = QtWidgets.QMessageBox.question(
            self._parent,
            title,
            text,
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
            QtWidgets.QMessageBox.No
        )
        return res == QtWidgets.QMessageBox.Yes

    def notify(self, title: str, text: str) -> None:
        logging.info(text)
        QtWidgets.QMessageBox.information(self._parent, title, text, QtWidgets.QMessageBox.Ok)

    def warn(self, title: str, text: str) -> None:
        logging.warning(text)
        QtWidgets.QMessageBox.warning(self._parent, title, text, QtWidgets.QMessageBox.Ok)
