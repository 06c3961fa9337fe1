"""Body info panel displaying orbital data for the selected body."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from utils.constants import STATUS_ERROR, STATUS_SUCCESS

FIELD_DEFS = [
    ("sun_distance_au", "Sun Distance", "AU"),
    ("sma_au", "Semi-major Axis", "AU"),
    ("sma_km", "Semi-major Axis", "km"),
    ("ecc", "Eccentricity", ""),
    ("inc", "Inclination", "deg"),
    ("raan", "Asc. Node", "deg"),
    ("aop", "Arg. Periapsis", "deg"),
    ("period", "Period", "days"),
    ("radius", "Mean Radius", "km"),
    ("diameter", "Est. Diameter", "km"),
    ("epoch", "Elements Epoch", "UTC"),
]

FORMATTERS = {
    "sun_distance_au": lambda v: f"{v:.4f}",
    "sma_au": lambda v: f"{v:.4f}",
    "sma_km": lambda v: f"{v:,.0f}",
    "ecc": lambda v: f"{v:.6f}",
    "inc": lambda v: f"{v:.4f}",
    "raan": lambda v: f"{v:.4f}",
    "aop": lambda v: f"{v:.4f}",
    "period": lambda v: f"{v:,.2f}",
    "radius": lambda v: f"{v:,.1f}",
    "diameter": lambda v: f"{v:.3f}",
    "epoch": lambda v: v.strftime("%Y-%m-%d %H:%M"),
}


class InfoPanelWidget(QGroupBox):
    """Displays orbital data for the selected planet, moon or asteroid."""

    def __init__(self, parent=None):
        super().__init__("BODY INFO", parent)

        layout = QVBoxLayout()
        layout.setSpacing(4)

        self.name_label = QLabel("No body selected")
        self.name_label.setObjectName("titleLabel")
        layout.addWidget(self.name_label)

        self.kind_label = QLabel("")
        self.kind_label.setObjectName("subtitleLabel")
        layout.addWidget(self.kind_label)

        self.hazard_label = QLabel("")
        self.hazard_label.setObjectName("unitLabel")
        layout.addWidget(self.hazard_label)

        layout.addSpacing(8)

        self.data_layout = QFormLayout()
        self.data_layout.setSpacing(4)
        self.data_layout.setLabelAlignment(Qt.AlignmentFlag.AlignLeft)
        self.data_layout.setFieldGrowthPolicy(
            QFormLayout.FieldGrowthPolicy.AllNonFixedFieldsGrow
        )

        self._fields: dict[str, QLabel] = {}

        for key, label, unit in FIELD_DEFS:
            value_label = QLabel("--")
            value_label.setObjectName("valueLabel")

            if unit:
                row_widget = QWidget()
                row_layout = QHBoxLayout(row_widget)
                row_layout.setContentsMargins(0, 0, 0, 0)
                row_layout.setSpacing(4)
                row_layout.addWidget(value_label, stretch=1)
                unit_lbl = QLabel(unit)
                unit_lbl.setObjectName("unitLabel")
                unit_lbl.setFixedWidth(40)
                row_layout.addWidget(unit_lbl)
                self.data_layout.addRow(label + ":", row_widget)
            else:
                self.data_layout.addRow(label + ":", value_label)

            self._fields[key] = value_label

        layout.addLayout(self.data_layout)
        self.setLayout(layout)

    def update_data(self, data: dict) -> None:
        """Update all fields with new body data."""
        self.name_label.setText(data.get("name", "Unknown"))
        self.kind_label.setText(str(data.get("kind", "")).title())

        if data.get("kind") == "asteroid":
            if data.get("hazardous"):
                self.hazard_label.setText("Potentially hazardous")
                self.hazard_label.setStyleSheet(f"color: {STATUS_ERROR};")
            else:
                self.hazard_label.setText("Not hazardous")
                self.hazard_label.setStyleSheet(f"color: {STATUS_SUCCESS};")
        else:
            self.hazard_label.setText("")

        for key, label in self._fields.items():
            value = data.get(key)
            if value is None:
                label.setText("--")
                continue
            try:
                label.setText(FORMATTERS[key](value))
            except (ValueError, TypeError, OverflowError):
                label.setText("--")

    def clear(self) -> None:
        """Reset all fields."""
        self.name_label.setText("No body selected")
        self.kind_label.setText("")
        self.hazard_label.setText("")
        for label in self._fields.values():
            label.setText("--")
