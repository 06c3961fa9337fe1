"""Time controls widget: play/pause, time warp, and time display."""

from __future__ import annotations

from datetime import datetime, timezone

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QVBoxLayout,
)

# (simulated seconds per wall-clock second, label)
WARP_STEPS: list[tuple[float, str]] = [
    (1.0, "Real time"),
    (3600.0, "1 hour/s"),
    (21600.0, "6 hours/s"),
    (86400.0, "1 day/s"),
    (604800.0, "1 week/s"),
    (2592000.0, "30 days/s"),
    (7776000.0, "90 days/s"),
    (31557600.0, "1 year/s"),
]
DEFAULT_WARP_INDEX = 3


def warp_label(factor: float) -> str:
    """Human label for a warp factor, falling back to a plain multiplier."""
    for value, label in WARP_STEPS:
        if value == factor:
            return label
    return f"{factor:g}x"


class TimeControlsWidget(QGroupBox):
    """Play/pause, time warp slider, time display, Jump to Now."""

    play_toggled = pyqtSignal(bool)  # True = playing
    warp_changed = pyqtSignal(float)  # warp factor
    time_jumped = pyqtSignal(object)  # datetime to jump to

    def __init__(self, parent=None):
        super().__init__("TIME CONTROLS", parent)
        self._is_playing = True

        layout = QVBoxLayout()
        layout.setSpacing(8)

        row1 = QHBoxLayout()
        row1.setSpacing(8)

        self.play_btn = QPushButton("Pause")
        self.play_btn.setObjectName("primaryButton")
        self.play_btn.setFixedWidth(80)
        self.play_btn.setFixedHeight(36)
        self.play_btn.clicked.connect(self._toggle_play)
        row1.addWidget(self.play_btn)

        self.warp_label = QLabel(WARP_STEPS[DEFAULT_WARP_INDEX][1])
        self.warp_label.setObjectName("valueLabel")
        self.warp_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.warp_label.setMinimumWidth(100)
        row1.addWidget(self.warp_label)

        layout.addLayout(row1)

        slider_row = QHBoxLayout()
        slider_row.setSpacing(8)

        slow_label = QLabel("1x")
        slow_label.setObjectName("unitLabel")
        slider_row.addWidget(slow_label)

        self.warp_slider = QSlider(Qt.Orientation.Horizontal)
        self.warp_slider.setRange(0, len(WARP_STEPS) - 1)
        self.warp_slider.setValue(DEFAULT_WARP_INDEX)
        self.warp_slider.setTickPosition(QSlider.TickPosition.TicksBelow)
        self.warp_slider.setTickInterval(1)
        self.warp_slider.valueChanged.connect(self._on_warp_change)
        slider_row.addWidget(self.warp_slider)

        fast_label = QLabel("1 yr/s")
        fast_label.setObjectName("unitLabel")
        slider_row.addWidget(fast_label)

        layout.addLayout(slider_row)

        self.time_display = QLabel("----/--/-- --:-- UTC")
        self.time_display.setObjectName("valueLabel")
        self.time_display.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.time_display)

        self.now_btn = QPushButton("Jump to Now")
        self.now_btn.setFixedHeight(32)
        self.now_btn.clicked.connect(self._jump_to_now)
        layout.addWidget(self.now_btn)

        self.setLayout(layout)

    def update_time_display(self, sim_time: datetime) -> None:
        if sim_time.tzinfo is None:
            sim_time = sim_time.replace(tzinfo=timezone.utc)
        self.time_display.setText(sim_time.strftime("%Y/%m/%d %H:%M UTC"))

    def set_playing(self, playing: bool) -> None:
        """Update the play button state."""
        self._is_playing = playing
        self.play_btn.setText("Pause" if playing else "Play")

    def set_warp_display(self, factor: float) -> None:
        """Reflect a warp change made elsewhere (keyboard shortcuts)."""
        self.warp_label.setText(warp_label(factor))

    def _toggle_play(self) -> None:
        self.set_playing(not self._is_playing)
        self.play_toggled.emit(self._is_playing)

    def _on_warp_change(self, index: int) -> None:
        factor, label = WARP_STEPS[index]
        self.warp_label.setText(label)
        self.warp_changed.emit(factor)

    def _jump_to_now(self) -> None:
        self.time_jumped.emit(datetime.now(timezone.utc))

    @property
    def current_warp(self) -> float:
        return WARP_STEPS[self.warp_slider.value()][0]
