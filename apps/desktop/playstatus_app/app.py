"""Desktop status window, settings dialog, and Qt integration."""

from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import QObject, Qt, Signal, Slot
from PySide6.QtGui import QAction, QColor, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QColorDialog,
    QDialog,
    QDialogButtonBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMenu,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from playstatus_core import (
    MAX_LINES,
    Color,
    FontStyle,
    FormatTemplateEngine,
    GlobalConfig,
    JsonSettingsStore,
    LineConfig,
    StatusController,
    WidgetConfig,
)
from playstatus_core.config import MAX_REFRESH_INTERVAL_MS, MIN_REFRESH_INTERVAL_MS
from playstatus_core.diagnostics import export_controller_diagnostics
from playstatus_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from playstatus_render import FramePainter

from .demo import SimulatedPlayer


class RepaintBridge(QObject):
    """Turns repaint requests from the refresh thread into queued Qt signals."""

    repaintRequested = Signal()

    def request_repaint(self) -> None:
        self.repaintRequested.emit()


class _LineRow(QWidget):
    def __init__(self, line: LineConfig, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.index = line.index
        self._color = line.color

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.template_edit = QLineEdit(line.template)
        self.template_edit.setPlaceholderText("{artist} - {title}")
        self.font_edit = QLineEdit(line.font.to_descriptor())
        self.font_edit.setMaximumWidth(140)
        self.color_button = QPushButton()
        self.color_button.setFixedWidth(48)
        self.color_button.clicked.connect(self._pick_color)
        self._paint_swatch()

        layout.addWidget(self.template_edit, 1)
        layout.addWidget(self.color_button)
        layout.addWidget(self.font_edit)

    def _paint_swatch(self) -> None:
        self.color_button.setStyleSheet(f"background-color: {self._color.hex};")

    @Slot()
    def _pick_color(self) -> None:
        r, g, b = self._color.to_rgb8()
        picked = QColorDialog.getColor(QColor(r, g, b), self, "Line color")
        if picked.isValid():
            self._color = Color.from_rgb8(picked.red(), picked.green(), picked.blue())
            self._paint_swatch()

    def line_config(self) -> LineConfig:
        return LineConfig(
            index=self.index,
            template=self.template_edit.text(),
            font=FontStyle.from_descriptor(self.font_edit.text()),
            color=self._color,
        )


class SettingsDialog(QDialog):
    """Line count, refresh interval, and per-line template/color/font editors."""

    def __init__(self, controller: StatusController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.setWindowTitle("Playback Status Properties")

        cfg = controller.config
        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        header.addWidget(QLabel("Lines"))
        self.num_lines = QSpinBox()
        self.num_lines.setRange(1, MAX_LINES)
        self.num_lines.setValue(cfg.general.active_line_count)
        self.num_lines.valueChanged.connect(self._on_num_lines_changed)
        header.addWidget(self.num_lines)
        header.addWidget(QLabel("Refresh interval (ms)"))
        self.interval = QSpinBox()
        self.interval.setRange(MIN_REFRESH_INTERVAL_MS, MAX_REFRESH_INTERVAL_MS)
        self.interval.setValue(cfg.general.refresh_interval_ms)
        header.addWidget(self.interval)
        layout.addLayout(header)

        self.rows = [_LineRow(line, self) for line in cfg.lines]
        for row in self.rows:
            layout.addWidget(row)
        self._on_num_lines_changed(self.num_lines.value())

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok
            | QDialogButtonBox.StandardButton.Apply
            | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._on_ok)
        buttons.rejected.connect(self.reject)
        buttons.button(QDialogButtonBox.StandardButton.Apply).clicked.connect(self.apply)
        self.status = QLabel("")
        layout.addWidget(self.status)
        layout.addWidget(buttons)

    @Slot(int)
    def _on_num_lines_changed(self, value: int) -> None:
        for row in self.rows:
            row.setVisible(row.index < value)

    def collect(self) -> WidgetConfig:
        return WidgetConfig(
            general=GlobalConfig(
                refresh_interval_ms=self.interval.value(),
                active_line_count=self.num_lines.value(),
            ),
            lines=[row.line_config() for row in self.rows],
        )

    @Slot()
    def apply(self) -> bool:
        try:
            failed = self.controller.on_settings_apply(self.collect())
            self.controller.render_now()
        except Exception as exc:
            self.status.setText(f"Error: {exc}")
            return False
        self.controller.repaint.request_repaint()

        if self.controller.persist_error:
            self.status.setText(f"Settings not saved: {self.controller.persist_error}")
            return False
        if failed:
            self.status.setText("Template rejected on line " + ", ".join(str(i + 1) for i in failed))
            return False
        self.status.setText("")
        return True

    @Slot()
    def _on_ok(self) -> None:
        if self.apply():
            self.accept()


class StatusWindow(QLabel):
    def __init__(self, controller: StatusController, player: SimulatedPlayer, painter: FramePainter) -> None:
        super().__init__()
        self.controller = controller
        self.player = player
        self.painter = painter
        self.setWindowTitle("Playback Status")
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setMinimumSize(300, 16)
        self.resize(420, 96)

    @Slot()
    def refresh(self) -> None:
        frame = self.controller.take_frame()
        self.painter.width = max(self.width(), self.painter.margin + 1)
        pixmap = QPixmap()
        pixmap.loadFromData(self.painter.to_png(frame), "PNG")
        self.setPixmap(pixmap)

    def contextMenuEvent(self, event) -> None:  # noqa: N802
        menu = QMenu(self)
        for label, handler in (
            ("Play", self.player.play),
            ("Pause", self.player.pause),
            ("Stop", self.player.stop),
            ("Next Track", self.player.next_track),
        ):
            action = QAction(label, menu)
            action.triggered.connect(lambda _checked=False, h=handler: h())
            menu.addAction(action)

        menu.addSeparator()
        configure_action = QAction("Configure", menu)
        configure_action.triggered.connect(self.open_settings)
        menu.addAction(configure_action)

        export_action = QAction("Export Diagnostics", menu)
        export_action.triggered.connect(self.export_diagnostics)
        menu.addAction(export_action)

        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(QApplication.instance().quit)
        menu.addAction(quit_action)
        menu.exec(event.globalPos())

    @Slot()
    def export_diagnostics(self) -> None:
        try:
            bundle = export_controller_diagnostics(self.controller)
        except Exception as exc:
            QMessageBox.warning(self, "Diagnostics", f"Error: {exc}")
            return
        QMessageBox.information(self, "Diagnostics", f"Diagnostics saved to {bundle}")

    @Slot()
    def open_settings(self) -> None:
        dialog = SettingsDialog(self.controller, self)
        dialog.exec()


def run_gui(settings: Path | None = None) -> int:
    configure_logging()
    install_crash_hooks()
    logger = get_logger()

    app = QApplication(sys.argv)
    app.setApplicationName("PlayStatus")

    store = JsonSettingsStore(settings)
    player = SimulatedPlayer()
    bridge = RepaintBridge()
    controller = StatusController(player, FormatTemplateEngine(), store, repaint=bridge, coalesce_repaints=True)
    player.listener = controller.on_transport_event

    window = StatusWindow(controller, player, FramePainter(width=420))
    bridge.repaintRequested.connect(window.refresh, Qt.ConnectionType.QueuedConnection)

    controller.start()
    controller.render_now()
    window.refresh()
    window.show()

    exit_code = app.exec()
    controller.shutdown()
    logger.info("app shutdown", extra={"event": "shutdown"})
    return int(exit_code)
