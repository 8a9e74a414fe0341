import logging

from core.config import load_settings
from core.logging_setup import setup_logging
from storage.supabase import make_client
from controller.app_controller import DashboardController
from gui.main_window import DashboardWindow

logger = logging.getLogger(__name__)


def main():
    settings = load_settings()
    log_file = setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    logger.info("Starting task risk dashboard (log: %s)", log_file)

    client = make_client(settings)
    try:
        controller = DashboardController(client, settings.capabilities)
        ui = DashboardWindow(controller, settings)
        ui.mainloop()
    finally:
        client.close()
        logger.info("Shut down")


if __name__ == "__main__":
    main()
