# promptsync/ui/widgets/file_list.py
from pathlib import Path
from typing import List

from PySide6.QtWidgets import QListWidget, QListWidgetItem, QAbstractItemView
from PySide6.QtCore import Signal, Slot
from loguru import logger

from ...core.models import TrackedFile


class TrackedFileList(QListWidget):
    """
    Drop target listing tracked files by name.
    Rows mirror the ContextStore order; the window keeps them in lockstep.
    """

    paths_dropped = Signal(list) # List[Path]
    remove_requested = Signal(int) # Row index

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DropOnly)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setAlternatingRowColors(True)
        self.setToolTip("Drop files or folders here. Double-click a file to remove it.")
        self.itemDoubleClicked.connect(self._on_item_double_clicked)

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event):
        urls = event.mimeData().urls()
        paths: List[Path] = [Path(url.toLocalFile()) for url in urls if url.isLocalFile()]
        if not paths:
            logger.debug("Drop contained no local files.")
            event.ignore()
            return
        event.acceptProposedAction()
        logger.debug(f"Dropped {len(paths)} path(s).")
        self.paths_dropped.emit(paths)

    def append_files(self, files: List[TrackedFile]):
        for tracked in files:
            item = QListWidgetItem(tracked.file_name)
            if tracked.path is not None:
                item.setToolTip(str(tracked.path))
            self.addItem(item)

    @Slot(QListWidgetItem)
    def _on_item_double_clicked(self, item: QListWidgetItem):
        row = self.row(item)
        if row >= 0:
            self.remove_requested.emit(row)
