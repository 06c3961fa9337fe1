"""NEO feed window dialog.

Lets the user pick the close-approach date window whose asteroids are
loaded into the scene. The NASA feed accepts at most seven days.
"""

from __future__ import annotations

import logging
from datetime import date

from PyQt6.QtCore import QDate, pyqtSignal
from PyQt6.QtWidgets import (
    QDateEdit,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from utils.constants import NEO_FEED_MAX_DAYS
from utils.time_utils import feed_date_range

logger = logging.getLogger(__name__)


class NeoFeedDialog(QDialog):
    """Pick the start date and how many days later the NEO feed ends."""

    range_selected = pyqtSignal(object, object)  # (start date, end date)

    def __init__(self, parent=None, start: date | None = None, days: int = NEO_FEED_MAX_DAYS):
        super().__init__(parent)
        self.setWindowTitle("Load Near-Earth Asteroids")
        self.setMinimumWidth(380)
        self.setModal(True)

        start = start or date.today()
        self._build_ui(start, days)

    def _build_ui(self, start: date, days: int) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(16)
        layout.setContentsMargins(24, 24, 24, 24)

        form = QFormLayout()
        form.setSpacing(8)

        self.start_edit = QDateEdit(QDate(start.year, start.month, start.day))
        self.start_edit.setCalendarPopup(True)
        self.start_edit.setDisplayFormat("yyyy-MM-dd")
        self.start_edit.dateChanged.connect(self._update_summary)
        form.addRow("Start date:", self.start_edit)

        self.days_spin = QSpinBox()
        self.days_spin.setRange(1, NEO_FEED_MAX_DAYS)
        self.days_spin.setValue(min(max(days, 1), NEO_FEED_MAX_DAYS))
        self.days_spin.setSuffix(" days later")
        self.days_spin.valueChanged.connect(self._update_summary)
        form.addRow("End date:", self.days_spin)

        layout.addLayout(form)

        self.summary_label = QLabel("")
        self.summary_label.setObjectName("unitLabel")
        layout.addWidget(self.summary_label)

        bottom_row = QHBoxLayout()
        bottom_row.setSpacing(8)
        bottom_row.addStretch()

        self.load_btn = QPushButton("Load")
        self.load_btn.setObjectName("primaryButton")
        self.load_btn.setFixedWidth(100)
        self.load_btn.clicked.connect(self._load)
        bottom_row.addWidget(self.load_btn)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.setFixedWidth(80)
        cancel_btn.clicked.connect(self.reject)
        bottom_row.addWidget(cancel_btn)

        layout.addLayout(bottom_row)
        self._update_summary()

    def selected_range(self) -> tuple[date, date]:
        start = self.start_edit.date().toPyDate()
        return feed_date_range(start, self.days_spin.value())

    def _update_summary(self) -> None:
        start, end = self.selected_range()
        self.summary_label.setText(
            f"Close approaches from {start.isoformat()} to {end.isoformat()}"
        )

    def _load(self) -> None:
        start, end = self.selected_range()
        logger.info("NEO feed window selected: %s to %s", start, end)
        self.range_selected.emit(start, end)
        self.accept()
