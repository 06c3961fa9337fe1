"""Control column beside the 3D viewport.

Stacks the body list, the simulation clock, the display toggles and the
selected body's info panel in one scrollable column.
"""

from __future__ import annotations

from typing import Iterable, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QFrame,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ui.info_panel import InfoPanelWidget
from ui.widgets.body_list import BodyListWidget
from ui.widgets.display_options import DisplayOptionsWidget
from ui.widgets.time_controls import TimeControlsWidget

SIDEBAR_WIDTH = 380


class SidebarWidget(QFrame):
    """Explorer controls, with helpers for feeding bodies and info in."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("sidebar")
        self.setFixedWidth(SIDEBAR_WIDTH)

        self.body_list = BodyListWidget()
        self.time_controls = TimeControlsWidget()
        self.display_options = DisplayOptionsWidget()
        self.info_panel = InfoPanelWidget()

        content = QWidget()
        column = QVBoxLayout(content)
        column.setContentsMargins(16, 16, 16, 16)
        column.setSpacing(16)
        for section in (self.body_list, self.time_controls, self.display_options, self.info_panel):
            column.addWidget(section)
        column.addStretch()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setWidget(content)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(scroll)

    def add_bodies(self, bodies: Iterable[tuple[str, str]]) -> None:
        """List (key, name) pairs in the order the scene received them."""
        for key, name in bodies:
            self.body_list.add_body(key, name)

    def show_body(self, info: Optional[dict]) -> None:
        """Fill the info panel, or clear it when the body is not in the scene."""
        if info:
            self.info_panel.update_data(info)
        else:
            self.info_panel.clear()
