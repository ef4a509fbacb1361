"""
Entry point for the PySide6 authoring GUI.
"""
import logging
import sys
from typing import Callable, Optional

from ielts_toolkit.editor.upload import Uploader
from ielts_toolkit.sync.store import PartStore


def run(
    uploader: Optional[Uploader] = None,
    store: Optional[PartStore] = None,
    fetch_image: Optional[Callable[[str], bytes]] = None,
):
    """
    Main entry point for the GUI application.

    Without an uploader, image uploads fall back to local previews and
    flow chart groups cannot be saved.
    """
    from PySide6.QtWidgets import QApplication
    from ielts_toolkit import __version__
    from ielts_toolkit.gui.main_window import MainWindow

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(f"Starting IELTS Toolkit {__version__}")

    app = QApplication(sys.argv)
    app.setApplicationName("IELTS Toolkit")
    app.setApplicationDisplayName("IELTS Toolkit")

    window = MainWindow(uploader=uploader, store=store, fetch_image=fetch_image)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
