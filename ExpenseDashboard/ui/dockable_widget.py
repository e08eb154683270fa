"""
Dockable widget base class for unified behavior and sizing.

This module defines:
    - DockableWidget: base class for QDockWidget with unified features, size constraints,
      and a custom toggled signal for visibility changes.
"""
from typing import Optional

from PySide6 import QtWidgets, QtCore


class DockableWidget(QtWidgets.QDockWidget):
    """Base class for the dashboard's dock widgets.

    Emits ``toggled`` whenever the dock is shown or hidden so window actions can
    track its visibility.
    """
    toggled = QtCore.Signal(bool)

    def __init__(
            self,
            title: str,
            parent: Optional[QtWidgets.QWidget] = None,
            closable: bool = True,
            min_width: Optional[int] = None,
            min_height: Optional[int] = None,
            size_hint: Optional[QtCore.QSize] = None,
    ) -> None:
        super().__init__(title, parent=parent)

        features = QtWidgets.QDockWidget.DockWidgetMovable | QtWidgets.QDockWidget.DockWidgetFloatable
        if closable:
            features |= QtWidgets.QDockWidget.DockWidgetClosable

        self.setFeatures(features)
        self.setAllowedAreas(QtCore.Qt.AllDockWidgetAreas)
        self.setContentsMargins(0, 0, 0, 0)

        self._size_hint = size_hint

        if min_width is not None:
            self.setMinimumWidth(min_width)
        if min_height is not None:
            self.setMinimumHeight(min_height)

        self.visibilityChanged.connect(self.toggled.emit)

    def sizeHint(self) -> QtCore.QSize:
        if self._size_hint:
            return self._size_hint
        return super().sizeHint()

    @QtCore.Slot()
    def show_and_raise(self) -> None:
        """Make the dock visible and bring it to the front of its tab group."""
        self.show()
        self.raise_()
