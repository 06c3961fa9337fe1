"""Body list widget with checkboxes, search, and kind prefixes."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
)

KIND_PREFIXES = {
    "planet": "Planet",
    "moon": "Moon",
    "asteroid": "NEO",
}


class BodyListWidget(QGroupBox):
    """Scrollable list of scene bodies with checkboxes and filter."""

    body_toggled = pyqtSignal(str, bool)  # (key, visible)
    body_selected = pyqtSignal(str)  # key
    body_double_clicked = pyqtSignal(str)  # key (focus camera)

    def __init__(self, parent=None):
        super().__init__("BODIES", parent)

        layout = QVBoxLayout()
        layout.setSpacing(8)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Filter bodies...")
        self.search_input.setClearButtonEnabled(True)
        self.search_input.textChanged.connect(self._filter)
        layout.addWidget(self.search_input)

        self.list_widget = QListWidget()
        self.list_widget.setMinimumHeight(150)
        self.list_widget.setMaximumHeight(300)
        self.list_widget.currentItemChanged.connect(self._on_selection_changed)
        self.list_widget.itemChanged.connect(self._on_item_checked)
        self.list_widget.itemDoubleClicked.connect(self._on_double_click)
        layout.addWidget(self.list_widget)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(8)

        self.select_all_btn = QPushButton("All")
        self.select_all_btn.setFixedHeight(28)
        self.select_all_btn.clicked.connect(self._select_all)
        btn_row.addWidget(self.select_all_btn)

        self.select_none_btn = QPushButton("None")
        self.select_none_btn.setFixedHeight(28)
        self.select_none_btn.clicked.connect(self._select_none)
        btn_row.addWidget(self.select_none_btn)

        layout.addLayout(btn_row)
        self.setLayout(layout)

        self._items: dict[str, QListWidgetItem] = {}

    def add_body(self, key: str, name: str) -> None:
        """Add a body; the kind prefix comes from the key ("planet:3")."""
        if key in self._items:
            return
        kind = key.split(":", 1)[0]
        prefix = KIND_PREFIXES.get(kind, kind.title())

        item = QListWidgetItem(f"[{prefix}] {name}")
        item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
        item.setCheckState(Qt.CheckState.Checked)
        item.setData(Qt.ItemDataRole.UserRole, key)
        item.setData(Qt.ItemDataRole.UserRole + 1, name)
        item.setData(Qt.ItemDataRole.UserRole + 2, prefix)

        self.list_widget.blockSignals(True)
        self.list_widget.addItem(item)
        self.list_widget.blockSignals(False)
        self._items[key] = item

    def highlight_body(self, key: str) -> None:
        """Programmatically select a body in the list."""
        item = self._items.get(key)
        if item is not None:
            self.list_widget.blockSignals(True)
            self.list_widget.setCurrentItem(item)
            self.list_widget.blockSignals(False)

    def get_selected_key(self) -> str | None:
        item = self.list_widget.currentItem()
        if item:
            return item.data(Qt.ItemDataRole.UserRole)
        return None

    @property
    def count(self) -> int:
        return len(self._items)

    def _filter(self, text: str) -> None:
        text_lower = text.lower()
        for i in range(self.list_widget.count()):
            item = self.list_widget.item(i)
            name = item.data(Qt.ItemDataRole.UserRole + 1) or ""
            prefix = item.data(Qt.ItemDataRole.UserRole + 2) or ""
            visible = (
                not text
                or text_lower in name.lower()
                or text_lower in prefix.lower()
            )
            item.setHidden(not visible)

    def _on_selection_changed(
        self, current: QListWidgetItem, previous: QListWidgetItem
    ) -> None:
        if current:
            key = current.data(Qt.ItemDataRole.UserRole)
            if key:
                self.body_selected.emit(key)

    def _on_item_checked(self, item: QListWidgetItem) -> None:
        key = item.data(Qt.ItemDataRole.UserRole)
        checked = item.checkState() == Qt.CheckState.Checked
        if key:
            self.body_toggled.emit(key, checked)

    def _on_double_click(self, item: QListWidgetItem) -> None:
        key = item.data(Qt.ItemDataRole.UserRole)
        if key:
            self.body_double_clicked.emit(key)

    def _select_all(self) -> None:
        """Check all visible bodies."""
        for i in range(self.list_widget.count()):
            item = self.list_widget.item(i)
            if not item.isHidden():
                item.setCheckState(Qt.CheckState.Checked)

    def _select_none(self) -> None:
        """Uncheck all visible bodies."""
        for i in range(self.list_widget.count()):
            item = self.list_widget.item(i)
            if not item.isHidden():
                item.setCheckState(Qt.CheckState.Unchecked)
