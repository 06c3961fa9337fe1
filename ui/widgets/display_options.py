"""Display options widget: toggles for visual features."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QFormLayout,
    QGroupBox,
)


class DisplayOptionsWidget(QGroupBox):
    """Toggles for visual display features."""

    option_changed = pyqtSignal(str, object)  # (option_name, value)

    TOGGLES = [
        ("orbits", "Orbit Paths", True),
        ("labels", "Labels", True),
        ("moons", "Moons", True),
        ("asteroids", "Asteroids", True),
        ("lod", "Distant Planets as Dots", True),
        ("spin", "Planet Rotation", True),
    ]

    def __init__(self, parent=None):
        super().__init__("DISPLAY OPTIONS", parent)

        layout = QFormLayout()
        layout.setSpacing(8)
        layout.setLabelAlignment(Qt.AlignmentFlag.AlignLeft)
        layout.setFieldGrowthPolicy(QFormLayout.FieldGrowthPolicy.AllNonFixedFieldsGrow)

        self._toggles: dict[str, QCheckBox] = {}

        for key, label, default in self.TOGGLES:
            cb = QCheckBox()
            cb.setChecked(default)
            cb.toggled.connect(
                lambda checked, k=key: self.option_changed.emit(k, checked)
            )
            layout.addRow(label, cb)
            self._toggles[key] = cb

        self.setLayout(layout)

    def get_option(self, key: str) -> bool:
        if key in self._toggles:
            return self._toggles[key].isChecked()
        return False

    def set_option(self, key: str, value: bool) -> None:
        """Programmatically set a toggle option."""
        if key in self._toggles:
            self._toggles[key].setChecked(value)
