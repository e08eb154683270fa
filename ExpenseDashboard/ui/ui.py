"""UI styling utilities for ExpenseDashboard.

This module provides:
    - Font: font roles resolved from the application's default family
    - Theme: supported UI themes (light, dark)
    - Size: standardized size constants and scaling logic
    - Color: standardized color palette for widgets and themes
    - init_stylesheet / apply_theme: stylesheet token expansion
"""
import enum
import logging
import math
import os
import re

from PySide6 import QtWidgets, QtGui


class Font(enum.Enum):
    """Enumeration of font weights used by the custom painted widgets."""

    BlackFont = QtGui.QFont.Black
    BoldFont = QtGui.QFont.DemiBold
    MediumFont = QtGui.QFont.Medium
    LightFont = QtGui.QFont.Normal
    ThinFont = QtGui.QFont.Light

    def __call__(self, size):
        """
        Returns a QFont and its metrics for the given pixel size.

        Args:
            size (float|int): The desired font size.

        Returns:
            tuple: (QFont, QFontMetricsF)
        """
        if size <= 0:
            raise RuntimeError(f'Font size must be greater than 0, got {size}')

        k = (self.name, size)
        if k in font_cache:
            font = QtGui.QFont(font_cache[k])
            return font, QtGui.QFontMetricsF(font)

        font = QtGui.QFont(QtWidgets.QApplication.font())
        font.setWeight(self.value)
        font.setPixelSize(int(size))
        font_cache[k] = font
        return QtGui.QFont(font), QtGui.QFontMetricsF(font)


font_cache = {}


class Theme(enum.StrEnum):
    Light = 'light'
    Dark = 'dark'


class Size(enum.Enum):
    """Enumeration of size values used for UI scaling."""
    SmallText = 11.0
    MediumText = 12.0
    LargeText = 16.0
    Indicator = 4.0
    Separator = 1.0
    Margin = 18.0
    Section = 86.0
    RowHeight = 34.0
    DefaultWidth = 640.0
    DefaultHeight = 480.0

    def __new__(cls, value):
        obj = object.__new__(cls)
        obj._value_ = float(value)
        return obj

    def __call__(self, multiplier=1.0, apply_scale=True):
        """
        Returns the scaled size value.

        Args:
            multiplier (float): A multiplier to apply to the size.
            apply_scale (bool): If True, applies UI scaling factors.

        Returns:
            int: The scaled size.
        """
        if apply_scale:
            return round(self.value * float(multiplier))
        return round(self._value_ * float(multiplier))

    @property
    def value(self):
        """float: The scaled size value."""
        return self.size(self._value_)

    @classmethod
    def size(cls, value, ui_scale_factor=1.0, dpi=72.0):
        """Scale a value by DPI and UI scale factor."""
        return math.ceil(float(value) * (float(dpi) / 72.0)) * float(ui_scale_factor)


class Color(enum.Enum):
    """Enumeration of colours used across the UI."""

    Transparent = {
        Theme.Light.value: (0, 0, 0, 0),
        Theme.Dark.value: (0, 0, 0, 0),
    }
    VeryDarkBackground = {
        Theme.Light.value: (245, 246, 250),
        Theme.Dark.value: (30, 30, 30),
    }
    DarkBackground = {
        Theme.Light.value: (255, 255, 255),
        Theme.Dark.value: (45, 45, 45),
    }
    Background = {
        Theme.Light.value: (230, 232, 240),
        Theme.Dark.value: (65, 65, 65),
    }
    LightBackground = {
        Theme.Light.value: (210, 214, 226),
        Theme.Dark.value: (85, 85, 85),
    }
    DisabledText = {
        Theme.Light.value: (150, 150, 160),
        Theme.Dark.value: (135, 135, 135),
    }
    SecondaryText = {
        Theme.Light.value: (100, 100, 115),
        Theme.Dark.value: (185, 185, 185),
    }
    Text = {
        Theme.Light.value: (40, 40, 50),
        Theme.Dark.value: (225, 225, 225),
    }
    SelectedText = {
        Theme.Light.value: (0, 0, 0),
        Theme.Dark.value: (255, 255, 255),
    }
    Accent = {
        Theme.Light.value: (102, 126, 234),
        Theme.Dark.value: (122, 146, 244),
    }
    Red = {
        Theme.Light.value: (220, 53, 69),
        Theme.Dark.value: (229, 114, 114),
    }
    Green = {
        Theme.Light.value: (40, 167, 69),
        Theme.Dark.value: (90, 200, 155),
    }

    @classmethod
    def _get_theme(cls):
        from ..settings import lib
        theme = lib.settings['theme']
        if theme not in [f.value for f in Theme]:
            theme = Theme.Light.value
        return theme

    def __new__(cls, v):
        if not isinstance(v, dict):
            raise ValueError(f'Invalid color value: {v}. Must be a dictionary, got {type(v)}: {v}')
        obj = object.__new__(cls)
        obj._value_ = v
        return obj

    def __call__(self, qss=False):
        """
        Returns a QColor or CSS rgba string.

        Args:
            qss (bool): If True, returns a CSS rgba string suitable for QSS.

        Returns:
            QColor or str: A QColor instance if qss=False, otherwise a CSS rgba string.
        """
        theme = self._get_theme()
        if theme not in self._value_:
            theme = Theme.Light.value

        color = QtGui.QColor(*self._value_[theme])
        if not qss:
            return color

        return self.rgb(color)

    @staticmethod
    def rgb(color):
        """Returns the CSS rgba string for a QColor."""
        rgb = [str(f) for f in color.getRgb()]
        return f'rgba({",".join(rgb)})'


def init_stylesheet():
    """Loads and expands the custom style sheet used by the app.

    The style sheet template is stored in ``config/stylesheet.qss``. Tokens written as
    ``<Token>`` are replaced by color and size values, sizes accept a multiplier suffix,
    e.g. ``<Margin@0.5>``.

    Returns:
        str: The style sheet.

    """
    if not QtWidgets.QApplication.instance():
        raise RuntimeError('init_stylesheet() must be called after a QApplication is initiated.')

    from ..settings import lib
    if not os.path.isfile(lib.settings.stylesheet_path):
        raise FileNotFoundError(f'Style sheet file not found: {lib.settings.stylesheet_path}')

    with open(lib.settings.stylesheet_path, 'r', encoding='utf-8') as f:
        qss = f.read()

    kwargs = {}

    for enum_ in Color:
        kwargs[enum_.name] = Color.rgb(enum_())

    for enum_ in Size:
        for i in [float(f) / 10.0 for f in range(1, 101)]:
            key = f'{enum_.name}@{i:.1f}'
            if key in kwargs:
                raise KeyError(f'Key {key} already set!')
            kwargs[key] = round(enum_() * i)

    # Tokens are defined as "<token>" in the stylesheet file
    for match in re.finditer(r'<(.*?)>', qss):
        key = match.group(1)
        if key not in kwargs:
            raise KeyError(f'Key {key} not found in kwargs!')

        qss = qss.replace(f'<{key}>', str(kwargs[key]))

    # Make sure all tokens are replaced
    if re.search(r'<(.*?)>', qss):
        raise RuntimeError('Not all tokens were replaced!')

    return qss


def apply_theme() -> None:
    """Set the style sheet for the entire app.

    This function should be called after the QApplication is created.

    """
    if not QtWidgets.QApplication.instance():
        raise RuntimeError('apply_theme() must be called after a QApplication is initiated.')

    if os.environ.get('EXPENSEDASHBOARD_DISABLE_STYLESHEET', '').lower() in ['1', 'true', 'yes']:
        logging.warning('Stylesheet disabled by environment variable.')
        return

    qss = init_stylesheet()
    QtWidgets.QApplication.instance().setStyleSheet(qss)

    for widget in QtWidgets.QApplication.instance().topLevelWidgets():
        widget.update()
