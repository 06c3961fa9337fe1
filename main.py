"""Solar System Explorer: main entry point.

An interactive 3D view of the planets, their moons and near-Earth
asteroids, placed with Keplerian orbits and rendered with PyVista
inside a PyQt6 window.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

# MUST be set before any Qt/VTK imports
os.environ["QT_API"] = "pyqt6"

# Add project root to path for module imports
PROJECT_ROOT = Path(__file__).parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quieter libraries
    logging.getLogger("pyvista").setLevel(logging.WARNING)
    logging.getLogger("vtk").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def main() -> None:
    """Application entry point."""
    from dotenv import load_dotenv

    load_dotenv()
    logger = logging.getLogger(__name__)

    from utils.config import ConfigError, load_config
    from utils.constants import NASA_DEMO_KEY

    try:
        config = load_config()
    except ConfigError as e:
        setup_logging()
        logger.error("Configuration error: %s", e)
        sys.exit(2)

    setup_logging(config.log_level)
    if config.using_demo_key:
        logger.warning("NASA_API_KEY not set, using %s (rate limited)", NASA_DEMO_KEY)

    logger.info("Starting Solar System Explorer")

    from PyQt6.QtWidgets import QApplication, QSplashScreen
    from PyQt6.QtGui import QPixmap, QFont, QColor, QPainter
    from PyQt6.QtCore import Qt

    app = QApplication(sys.argv)
    app.setApplicationName("Solar System Explorer")
    app.setOrganizationName("SolarSystemExplorer")

    style_path = PROJECT_ROOT / "assets" / "styles" / "theme.qss"
    if style_path.exists():
        app.setStyleSheet(style_path.read_text(encoding="utf-8"))
        logger.info("Loaded theme stylesheet")

    splash_pixmap = QPixmap(450, 280)
    splash_pixmap.fill(QColor("#0A0A0F"))

    painter = QPainter(splash_pixmap)
    painter.setPen(QColor("#FFFFFF"))
    painter.setFont(QFont("Segoe UI", 20, QFont.Weight.Bold))
    painter.drawText(
        splash_pixmap.rect(),
        Qt.AlignmentFlag.AlignCenter,
        "Solar System Explorer",
    )
    painter.setFont(QFont("Segoe UI", 11))
    painter.setPen(QColor("#A3A3A3"))
    rect = splash_pixmap.rect()
    rect.moveTop(40)
    painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, "Loading...")
    painter.end()

    splash = QSplashScreen(splash_pixmap)
    splash.show()
    app.processEvents()

    config.textures_dir.mkdir(parents=True, exist_ok=True)

    splash.showMessage(
        "Initializing 3D scene...",
        Qt.AlignmentFlag.AlignBottom | Qt.AlignmentFlag.AlignHCenter,
        QColor("#A3A3A3"),
    )
    app.processEvents()

    from ui.app import SolarSystemApp

    window = SolarSystemApp(config)

    splash.close()
    window.show()

    window.sim_controller.play()
    window.sidebar.time_controls.set_playing(True)
    window.start_data_loading()

    logger.info("Application ready")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
