import sys
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QFont
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)
from wt.common.logger import log
from wt.core.clock import QtTicker
from wt.core.tracker import WorkTimeTracker
from wt.util.misc import duration_minutes, format_clock, format_time


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window of the work timer. Only displays values and forwards clicks; all the bookkeeping lives in the tracker.
class MainWindow(QMainWindow):

    def __init__(self, tracker=None):
        super().__init__()
        self.setWindowTitle("Work Timer")

        self.ticker = QtTicker(self)
        self.tracker = tracker or WorkTimeTracker(ticker=self.ticker)

        central = QWidget()
        self.setCentralWidget(central)
        lay = QVBoxLayout(central)

        # -- Master timer --
        self._time_label = QLabel()
        self._time_label.setAlignment(Qt.AlignCenter)
        self._time_label.setFont(QFont("Consolas", 28))
        lay.addWidget(self._time_label)

        row = QHBoxLayout()
        self._start_btn = QPushButton("Start")
        self._start_btn.clicked.connect(self._on_start_pause)
        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(self._on_reset)
        row.addWidget(self._start_btn)
        row.addWidget(reset_btn)
        lay.addLayout(row)

        # -- Manual adjustment --
        row = QHBoxLayout()
        self._minutes = QSpinBox()
        self._minutes.setRange(1, 600)
        self._minutes.setValue(10)
        self._minutes.setSuffix(" min")
        add_btn = QPushButton("+")
        add_btn.clicked.connect(lambda: self._on_adjust(1))
        sub_btn = QPushButton("-")
        sub_btn.clicked.connect(lambda: self._on_adjust(-1))
        row.addWidget(self._minutes)
        row.addWidget(add_btn)
        row.addWidget(sub_btn)
        lay.addLayout(row)

        # -- Status --
        row = QHBoxLayout()
        self._net_label = QLabel()
        self._sum_label = QLabel()
        self._sync_label = QLabel()
        sync_btn = QPushButton("Sync")
        sync_btn.clicked.connect(self.tracker.force_sync)
        debug_btn = QPushButton("Debug")
        debug_btn.clicked.connect(self.tracker.debug_timeline)
        for w in (self._net_label, self._sum_label, self._sync_label, sync_btn, debug_btn):
            row.addWidget(w)
        lay.addLayout(row)

        # -- Projects --
        self._projects = QListWidget()
        self._projects.itemClicked.connect(self._on_project_clicked)
        lay.addWidget(self._projects)

        row = QHBoxLayout()
        self._new_project = QLineEdit()
        self._new_project.setPlaceholderText("New project")
        self._new_project.returnPressed.connect(self._on_add_project)
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(self._on_delete_project)
        row.addWidget(self._new_project)
        row.addWidget(delete_btn)
        lay.addLayout(row)

        # -- Today's sessions --
        self._sessions = QListWidget()
        lay.addWidget(self._sessions)

        self.tracker.on_update(self._refresh)
        self.tracker.ledger.on_update(self._rebuild_projects)
        self.tracker.ledger.on_after_switch(lambda project: self._rebuild_sessions())
        # Sessions recorded outside a click (auto-correct, midnight, Sync) show up too
        self.tracker.timeline.on_change(self._rebuild_sessions)
        self._rebuild_projects()
        self._rebuild_sessions()
        self._refresh()

    # ------------------------------------------------------------------ #
    #  Button handlers                                                     #
    # ------------------------------------------------------------------ #

    def _on_start_pause(self):
        if self.tracker.timer.running:
            self.tracker.pause()
        else:
            self.tracker.start()

    def _confirm(self, text):
        return QMessageBox.question(self, "Confirm", text) == QMessageBox.Yes

    def _on_reset(self):
        if self.tracker.reset(lambda: self._confirm("Reset today's time?")):
            self._rebuild_projects()

    def _on_adjust(self, direction):
        self.tracker.adjust(direction * self._minutes.value() * 60)

    def _on_add_project(self):
        if self.tracker.add_project(self._new_project.text()):
            self._new_project.clear()

    def _on_project_clicked(self, item):
        self.tracker.select_project(item.data(Qt.UserRole))

    def _on_delete_project(self):
        item = self._projects.currentItem()
        if item is None:
            return
        project = self.tracker.ledger.get(item.data(Qt.UserRole))
        if project is None or project.is_default:
            return
        default_name = self.tracker.ledger.default_project.name
        if self._confirm(f"Delete project \"{project.name}\"? Its time will be transferred to \"{default_name}\"."):
            self.tracker.delete_project(project.id)

    # ------------------------------------------------------------------ #
    #  Display helpers                                                     #
    # ------------------------------------------------------------------ #

    def _rebuild_projects(self):
        self._projects.clear()
        active_id = self.tracker.ledger.active_project_id
        for project in self.tracker.ledger.projects:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, project.id)
            item.setForeground(QColor(project.color))
            font = item.font()
            font.setBold(project.id == active_id)
            item.setFont(font)
            self._projects.addItem(item)
        self._update_project_times()

    def _update_project_times(self):
        times = self.tracker.project_times()
        for i in range(self._projects.count()):
            item = self._projects.item(i)
            project = self.tracker.ledger.get(item.data(Qt.UserRole))
            if project is not None:
                item.setText(f"{project.name}    {format_time(times.get(project.id, 0))}")

    def _rebuild_sessions(self):
        self._sessions.clear()
        for s in self.tracker.todays_sessions():
            item = QListWidgetItem(f"{format_clock(s.start)} - {format_clock(s.end)} "
                                   f"({duration_minutes(s.start, s.end)} Min.) - {s.project_name}")
            item.setForeground(QColor(s.project_color))
            self._sessions.addItem(item)

    def _refresh(self):
        self._time_label.setText(self.tracker.timer.display)
        self._start_btn.setText("Pause" if self.tracker.timer.running else "Start")

        info = self.tracker.net_adjustment_info()
        self._net_label.setText(info.time_str)
        self._net_label.setStyleSheet(f"color: {'#28a745' if info.is_positive else '#dc3545'};")

        self._sum_label.setText(format_time(self.tracker.total_elapsed()))

        status = self.tracker.drift_status()
        if status.in_sync:
            self._sync_label.setText("✓ In Sync")
        else:
            self._sync_label.setText(f"⚠ Off by {status.difference}s")

        self._update_project_times()

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        self.tracker.shutdown()
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    log.info("Main window shown")
    sys.exit(app.exec())
