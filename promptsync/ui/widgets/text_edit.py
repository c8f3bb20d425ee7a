# promptsync/ui/widgets/text_edit.py

from PySide6.QtWidgets import QTextEdit, QSizePolicy
from PySide6.QtCore import Slot
from PySide6.QtGui import QKeySequence, QFontDatabase, QTextOption


class PromptTextEdit(QTextEdit):
    """Read-only view of the rendered prompt."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setAcceptRichText(False)
        self.setLineWrapMode(QTextEdit.LineWrapMode.WidgetWidth)
        self.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
        self.setWordWrapMode(QTextOption.WrapMode.WrapAnywhere)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    def keyPressEvent(self, event):
        # Copy and select all only
        if event.matches(QKeySequence.StandardKey.Copy) or \
           event.matches(QKeySequence.StandardKey.SelectAll):
            super().keyPressEvent(event)
        else:
            event.ignore()

    @Slot(str)
    def show_prompt(self, text: str):
        """Replaces the text but keeps the scroll position, so live reloads don't jump."""
        scrollbar = self.verticalScrollBar()
        position = scrollbar.value()
        self.setPlainText(text)
        scrollbar.setValue(min(position, scrollbar.maximum()))
