from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

from ihl.contracts import UNASSIGNED_TARGET, ActionRequest, ActionResult, ActionType
from ihl.core import make_id

ActionHandler = Callable[[ActionRequest], ActionResult]

CONFIRM_PROMPTS = {
    ActionType.REMOVE_FORWARD_LINE: "Remove the last forward line and unassign {n} player(s) from it?",
    ActionType.REMOVE_DEFENCE_PAIR: "Remove the last defence pair and unassign {n} player(s) from it?",
    ActionType.TOGGLE_BACKUP_GOALIE: "Disable the backup goalie and unassign the current backup goalie?",
}


@dataclass(slots=True)
class BoardSelection:
    player_id: str | None = None
    slot_id: str | None = None


class MainWindowFactory:
    def create(self, action_handler: ActionHandler):
        from PySide6.QtWidgets import (
            QAbstractItemView,
            QComboBox,
            QFileDialog,
            QHBoxLayout,
            QHeaderView,
            QInputDialog,
            QListWidget,
            QListWidgetItem,
            QMainWindow,
            QMessageBox,
            QPushButton,
            QTableWidget,
            QTableWidgetItem,
            QTextEdit,
            QVBoxLayout,
            QWidget,
        )
        from PySide6.QtCore import Qt

        class MainWindow(QMainWindow):
            def __init__(self) -> None:
                super().__init__()
                self.setWindowTitle("Line-up Builder")
                self.resize(1200, 760)
                self._view: dict[str, Any] = {}
                self._selection = BoardSelection()

                self.lineup_combo = QComboBox()
                self.lineup_combo.activated.connect(self._on_lineup_chosen)
                self.available = QListWidget()
                self.available.itemClicked.connect(self._on_available_clicked)
                self.board = QTableWidget(0, 5)
                self.board.setHorizontalHeaderLabels(["Group", "Slot", "Player", "Stick", "Warning"])
                self.board.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
                self.board.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
                self.board.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
                self.board.cellClicked.connect(self._on_slot_clicked)
                self.output = QTextEdit()
                self.output.setReadOnly(True)
                self.output.document().setMaximumBlockCount(300)

                buttons = QVBoxLayout()
                for label, handler in [
                    ("Import roster (CSV)", self._import_roster),
                    ("Rename team", self._rename_team),
                    ("Import opposition (CSV)", self._import_opposition),
                    ("New lineup", self._new_lineup),
                    ("Rename lineup", self._rename_lineup),
                    ("Duplicate lineup", self._duplicate_lineup),
                    ("Delete lineup", self._delete_lineup),
                    ("+ Forward line", lambda: self._structure(ActionType.ADD_FORWARD_LINE)),
                    ("- Forward line", lambda: self._structure(ActionType.REMOVE_FORWARD_LINE)),
                    ("+ Defence pair", lambda: self._structure(ActionType.ADD_DEFENCE_PAIR)),
                    ("- Defence pair", lambda: self._structure(ActionType.REMOVE_DEFENCE_PAIR)),
                    ("Toggle backup goalie", lambda: self._structure(ActionType.TOGGLE_BACKUP_GOALIE)),
                    ("Auto-fill", lambda: self._dispatch(ActionType.AUTO_FILL, {})),
                    ("Return to pool", self._return_to_pool),
                    ("Clear all", self._clear_all),
                    ("Export sheet", lambda: self._dispatch(ActionType.EXPORT_LINEUP, {}, refresh=False)),
                    ("Render PNG", lambda: self._dispatch(ActionType.RENDER_LINEUP, {}, refresh=False)),
                ]:
                    button = QPushButton(label)
                    button.clicked.connect(handler)
                    buttons.addWidget(button)
                buttons.addStretch(1)

                left = QVBoxLayout()
                left.addWidget(self.lineup_combo)
                left.addWidget(self.available)
                body = QHBoxLayout()
                body.addLayout(left, 1)
                body.addWidget(self.board, 3)
                body.addLayout(buttons)

                root = QWidget()
                layout = QVBoxLayout(root)
                layout.addLayout(body, 4)
                layout.addWidget(self.output, 1)
                self.setCentralWidget(root)
                self._refresh()

            def _dispatch(self, action: ActionType, payload: dict[str, Any], *, refresh: bool = True) -> ActionResult:
                result = action_handler(ActionRequest(make_id("req"), action, payload))
                state = "OK" if result.success else "FAIL"
                self.output.append(f"[{state}] {action.value}: {result.message}")
                if "paths" in result.data or "path" in result.data:
                    self.output.append(json.dumps({k: result.data.get(k) for k in ("path", "paths") if k in result.data}))
                if refresh and "slots" in result.data:
                    self._show(result.data)
                return result

            def _refresh(self) -> None:
                result = action_handler(ActionRequest(make_id("req"), ActionType.GET_LINEUP, {}))
                if result.success:
                    self._show(result.data)
                else:
                    self.statusBar().showMessage(result.message)

            def _show(self, view: dict[str, Any]) -> None:
                self._view = view
                self._selection = BoardSelection()
                self.setWindowTitle(f"Line-up Builder - {view['team_name']} / {view['name']}")
                self.lineup_combo.clear()
                for entry in view["lineups"]:
                    self.lineup_combo.addItem(entry["name"], entry["lineup_id"])
                    if entry["active"]:
                        self.lineup_combo.setCurrentIndex(self.lineup_combo.count() - 1)
                self.available.clear()
                for p in view["available"]:
                    item = QListWidgetItem(f"#{p['number']} {p['name']} ({p['preferred_position']})")
                    item.setData(Qt.ItemDataRole.UserRole, p["player_id"])
                    self.available.addItem(item)
                self.board.setRowCount(len(view["slots"]))
                for row_idx, slot in enumerate(view["slots"]):
                    player = f"#{slot['number']} {slot['name']}" if slot["player_id"] else ""
                    cells = [slot["group_label"], slot["slot_id"], player, slot["stick"], "not familiar" if slot["mismatch"] else ""]
                    for col, text in enumerate(cells):
                        self.board.setItem(row_idx, col, QTableWidgetItem(text))

            def _on_lineup_chosen(self, index: int) -> None:
                self._dispatch(ActionType.SET_ACTIVE_LINEUP, {"lineup_id": self.lineup_combo.itemData(index)})

            def _on_available_clicked(self, item: QListWidgetItem) -> None:
                self._selection = BoardSelection(player_id=item.data(Qt.ItemDataRole.UserRole))

            def _on_slot_clicked(self, row: int, _column: int) -> None:
                slot = self._view["slots"][row]
                if self._selection.player_id is not None:
                    self._dispatch(ActionType.MOVE_PLAYER, {"player_id": self._selection.player_id, "target": slot["slot_id"]})
                    return
                self._selection = BoardSelection(player_id=slot["player_id"], slot_id=slot["slot_id"])

            def _return_to_pool(self) -> None:
                if self._selection.player_id is None:
                    return
                self._dispatch(ActionType.MOVE_PLAYER, {"player_id": self._selection.player_id, "target": UNASSIGNED_TARGET})

            def _structure(self, action: ActionType) -> None:
                result = self._dispatch(action, {})
                if not result.data.get("requires_confirmation"):
                    return
                prompt = CONFIRM_PROMPTS[action].format(n=result.data.get("displaced_count", 0))
                if QMessageBox.question(self, "Confirm", prompt) == QMessageBox.StandardButton.Yes:
                    self._dispatch(action, {"confirmed": True})

            def _import_roster(self) -> None:
                path, _ = QFileDialog.getOpenFileName(self, "Import roster", "", "CSV files (*.csv)")
                if path:
                    self._dispatch(ActionType.IMPORT_ROSTER, {"path": path}, refresh=False)
                    self._refresh()

            def _rename_team(self) -> None:
                name, ok = QInputDialog.getText(self, "Rename team", "New team name?", text=self._view.get("team_name", ""))
                if ok and name.strip():
                    self._dispatch(ActionType.RENAME_TEAM, {"name": name}, refresh=False)
                    self._refresh()

            def _import_opposition(self) -> None:
                path, _ = QFileDialog.getOpenFileName(self, "Import opposition", "", "CSV files (*.csv)")
                if path:
                    self._dispatch(ActionType.IMPORT_OPPOSITION, {"path": path}, refresh=False)

            def _new_lineup(self) -> None:
                name, ok = QInputDialog.getText(self, "New lineup", "Lineup name?", text=f"Lineup {len(self._view.get('lineups', [])) + 1}")
                if ok and name.strip():
                    self._dispatch(ActionType.CREATE_LINEUP, {"name": name})

            def _rename_lineup(self) -> None:
                name, ok = QInputDialog.getText(self, "Rename lineup", "New lineup name?", text=self._view.get("name", ""))
                if ok and name.strip():
                    self._dispatch(ActionType.RENAME_LINEUP, {"name": name})

            def _duplicate_lineup(self) -> None:
                default = f"{self._view.get('name', '')} (copy)"
                name, ok = QInputDialog.getText(self, "Duplicate lineup", "Name for duplicated lineup?", text=default)
                if ok and name.strip():
                    self._dispatch(ActionType.DUPLICATE_LINEUP, {"name": name})

            def _delete_lineup(self) -> None:
                prompt = f"Delete lineup \"{self._view.get('name', '')}\"?"
                if QMessageBox.question(self, "Delete lineup", prompt) == QMessageBox.StandardButton.Yes:
                    self._dispatch(ActionType.DELETE_LINEUP, {})

            def _clear_all(self) -> None:
                if QMessageBox.question(self, "Clear", "Clear all assigned players for this lineup?") == QMessageBox.StandardButton.Yes:
                    self._dispatch(ActionType.CLEAR_ASSIGNMENTS, {})

        return MainWindow()


def launch_ui(action_handler: ActionHandler) -> None:
    from PySide6.QtWidgets import QApplication

    app = QApplication([])
    window = MainWindowFactory().create(action_handler)
    window.show()
    app.exec()
