# promptsync/ui/windows/main_window.py
from typing import List
from pathlib import Path

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                             QSplitter, QPushButton, QLabel, QComboBox,
                             QPlainTextEdit, QGroupBox, QStatusBar, QFileDialog,
                             QApplication)
from PySide6.QtGui import QKeySequence
from PySide6.QtCore import Qt, Slot, Signal, QByteArray, QTimer, QObject

from loguru import logger

from ..widgets.file_list import TrackedFileList
from ..widgets.text_edit import PromptTextEdit
from ...config.loader import get_config
from ...core.models import TaskType
from ...core.session import PromptSession
from ...core.token_counter import count_tokens, TIKTOKEN_AVAILABLE


class WatcherSignals(QObject):
    """
    Lives on the UI thread. The watcher thread only emits files_changed;
    Qt queues the call, so rendering and widget updates happen on the UI thread.
    """
    files_changed = Signal()


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("PromptSync")

        self.config = get_config()
        self.watcher_signals = WatcherSignals(self)
        self.session = PromptSession(config=self.config, on_change=self.watcher_signals.files_changed.emit)

        # Coalesces bursts of edits and keystrokes into one render
        self.render_debounce_timer = QTimer(self)
        self.render_debounce_timer.setInterval(self.config.render_debounce_ms)
        self.render_debounce_timer.setSingleShot(True)
        self.render_debounce_timer.timeout.connect(self.refresh_prompt)

        self._setup_ui()
        self._setup_menus()
        self._setup_statusbar()
        self._connect_signals()
        self._load_state()

        self.session.start()
        self.refresh_prompt()
        if not TIKTOKEN_AVAILABLE:
            self._show_status_message("Token counts are estimated (tiktoken unavailable)", 0)
        logger.info("MainWindow initialized.")

    # --- UI Setup ---

    def _setup_ui(self):
        central = QWidget(self)
        main_layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        task_row = QHBoxLayout()
        task_row.addWidget(QLabel("Task Type:"))
        self.task_combo = QComboBox()
        self.task_combo.addItems([t.value for t in TaskType])
        task_row.addWidget(self.task_combo)
        task_row.addStretch(1)
        main_layout.addLayout(task_row)

        main_layout.addWidget(QLabel("Task Instruction (Enter raw prompt here):"))
        self.instruction_edit = QPlainTextEdit()
        self.instruction_edit.setMaximumHeight(120)
        main_layout.addWidget(self.instruction_edit)

        splitter = QSplitter(Qt.Orientation.Vertical, self)
        files_box = QGroupBox("File Input")
        files_layout = QVBoxLayout(files_box)
        files_layout.addWidget(QLabel("Drag and drop files or folders here. Double-click to remove."))
        self.file_list = TrackedFileList()
        files_layout.addWidget(self.file_list)
        splitter.addWidget(files_box)

        prompt_box = QGroupBox("Final Prompt")
        prompt_layout = QVBoxLayout(prompt_box)
        self.prompt_view = PromptTextEdit()
        prompt_layout.addWidget(self.prompt_view)
        button_row = QHBoxLayout()
        self.add_button = QPushButton("Add Files...")
        self.generate_button = QPushButton("Generate Prompt")
        self.copy_button = QPushButton("Copy")
        self.token_count_label = QLabel("Tokens: 0")
        button_row.addWidget(self.add_button)
        button_row.addStretch(1)
        button_row.addWidget(self.token_count_label)
        button_row.addWidget(self.generate_button)
        button_row.addWidget(self.copy_button)
        prompt_layout.addLayout(button_row)
        splitter.addWidget(prompt_box)
        splitter.setSizes([250, 450])
        main_layout.addWidget(splitter, 1)

    def _setup_menus(self):
        menubar = self.menuBar()
        file_menu = menubar.addMenu("&File")
        file_menu.addAction("&Add Files...", self._open_files_dialog, QKeySequence.StandardKey.Open)
        file_menu.addAction("Add &Folder...", self._open_folder_dialog)
        file_menu.addSeparator()
        file_menu.addAction("&Quit", self.close, QKeySequence.StandardKey.Quit)
        edit_menu = menubar.addMenu("&Edit")
        edit_menu.addAction("&Copy Prompt", self.copy_prompt, QKeySequence("Ctrl+Shift+C"))
        edit_menu.addAction("C&lear Files", self.clear_files)

    def _setup_statusbar(self):
        self.status_bar = QStatusBar(self)
        self.setStatusBar(self.status_bar)
        self.status_label = QLabel("Ready")
        self.status_bar.addWidget(self.status_label, 1)

    def _connect_signals(self):
        self.watcher_signals.files_changed.connect(self._on_files_changed)
        self.task_combo.currentTextChanged.connect(self._on_task_changed)
        self.instruction_edit.textChanged.connect(self._on_instruction_changed)
        self.file_list.paths_dropped.connect(self.add_paths)
        self.file_list.remove_requested.connect(self.remove_file)
        self.generate_button.clicked.connect(self.refresh_prompt)
        self.copy_button.clicked.connect(self.copy_prompt)
        self.add_button.clicked.connect(self._open_files_dialog)

    def _load_state(self):
        self.task_combo.setCurrentText(self.session.task_type.value)
        self.instruction_edit.setPlainText(self.config.last_instruction)
        self.session.instruction = self.config.last_instruction
        try:
            if self.config.window_geometry:
                geom = QByteArray.fromHex(self.config.window_geometry)
                if not self.restoreGeometry(geom):
                    logger.warning("Failed to restore window geometry.")
                    self.resize(900, 750)
            else:
                self.resize(900, 750)
        except Exception as e:
            logger.error(f"Error restoring window geometry: {e}")
            self.resize(900, 750)

    def update_config_before_save(self):
        self.config.default_task_type = self.session.task_type
        self.config.last_instruction = self.session.instruction
        try:
            self.config.window_geometry = bytes(self.saveGeometry().toHex())
        except Exception as e:
            logger.error(f"Could not save window geometry: {e}")

    def closeEvent(self, event):
        logger.info("Close event triggered. Stopping watcher...")
        self.render_debounce_timer.stop()
        self.session.stop()
        self.update_config_before_save()
        event.accept()

    # --- User actions ---

    @Slot(list)
    def add_paths(self, paths: List[Path]):
        added = self.session.drop(paths)
        self.file_list.append_files(added)
        if added:
            self._show_status_message(f"Added {len(added)} file(s).", 5000)
        else:
            self._show_status_message("No readable files found, see log for details.", 5000)
        self.refresh_prompt()

    @Slot(int)
    def remove_file(self, index: int):
        # Store and list row go together or not at all
        if self.session.remove_at(index):
            self.file_list.takeItem(index)
            self.refresh_prompt()

    @Slot()
    def clear_files(self):
        self.session.clear()
        self.file_list.clear()
        self.refresh_prompt()

    @Slot()
    def copy_prompt(self):
        text = self.prompt_view.toPlainText()
        QApplication.clipboard().setText(text)
        self._show_status_message("Prompt copied to clipboard.", 3000)

    @Slot()
    def _open_files_dialog(self):
        files, _ = QFileDialog.getOpenFileNames(self, "Add Files", str(Path.home()))
        if files:
            self.add_paths([Path(f) for f in files])

    @Slot()
    def _open_folder_dialog(self):
        folder = QFileDialog.getExistingDirectory(self, "Add Folder", str(Path.home()))
        if folder:
            self.add_paths([Path(folder)])

    # --- Rendering ---

    @Slot(str)
    def _on_task_changed(self, text: str):
        self.session.set_task_type(text)
        self.refresh_prompt()

    @Slot()
    def _on_instruction_changed(self):
        self.session.instruction = self.instruction_edit.toPlainText()
        self.render_debounce_timer.start()

    @Slot()
    def _on_files_changed(self):
        logger.debug("Tracked files changed on disk, scheduling render.")
        self._show_status_message("Reloaded changed files.", 3000)
        self.render_debounce_timer.start()

    @Slot()
    def refresh_prompt(self):
        prompt = self.session.render()
        self.prompt_view.show_prompt(prompt)
        self.token_count_label.setText(f"Tokens: {count_tokens(prompt)}")

    def _show_status_message(self, message: str, timeout: int = 0):
        if timeout > 0:
            self.status_bar.showMessage(message, timeout)
        else:
            self.status_label.setText(message)
