"""Restroom Finder - Main application."""
import toga
import sys
import asyncio
import logging
import concurrent.futures

from .state import SessionState
from .config_manager import ConfigManager
from .logging_config import setup_logging
from .services.api_service import APIService
from .services.auth_service import AuthService, SIGNED_IN, SIGNED_OUT, INITIAL_SESSION
from .services.restroom_service import RestroomService
from .services.location_service import LocationService
from .handlers.map_handler import MapHandler
from .handlers.search_handler import SearchHandler
from .handlers.add_restroom_handler import AddRestroomHandler
from .handlers.profile_handler import ProfileHandler
from .ui.login_ui import LoginUI
from .ui_manager import UIManager
from .map import detect_platform, NATIVE

FATAL_ERROR_TITLE = 'Unexpected error occurred'
FATAL_ERROR_MESSAGE = 'The app will restart to recover.'


class RestroomApp(toga.App):
    """Main RestroomApp class."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        super().__init__(formal_name='Restroom Finder', app_id='org.restroomfinder.app')

    def startup(self):
        """Initialize the app"""
        setup_logging()
        self.logger.info("Starting RestroomApp initialization")

        self.config = ConfigManager()
        self.logger.info(f"Configuration loaded: API URL={self.config.api_base_url}")
        self.platform = detect_platform(self.config.force_platform)
        self.install_error_handlers()

        # Services
        self.auth_service = AuthService(self.config.api_base_url, timeout=self.config.api_timeout)
        self.api_service = APIService(
            self.config.api_base_url,
            max_retries=self.config.api_max_retries,
            retry_delay=self.config.api_retry_delay,
            timeout=self.config.api_timeout,
            auth_service=self.auth_service,
        )
        self.restroom_service = RestroomService(self.api_service, fallback_limit=self.config.fallback_result_limit)
        self.location_service = LocationService(self._device_location(), self.config)
        self.logger.info("Services initialized")

        self.state = SessionState()

        # Blocking network calls run here; results come back via run_background
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=4)

        # Handlers
        self.map_handler = MapHandler(self)
        self.search_handler = SearchHandler(self)
        self.add_restroom_handler = AddRestroomHandler(self)
        self.profile_handler = ProfileHandler(self)
        self.logger.info("All event handlers initialized")

        self.ui_manager = UIManager(self)
        self.main_window = toga.MainWindow(title=self.formal_name)
        self.ui_manager.main_window = self.main_window

        self._unsubscribe_auth = self.auth_service.on_auth_state_change(self._dispatch_auth_event)

        self.main_window.show()
        self.logger.info("RestroomApp initialization completed successfully")

    def _device_location(self):
        try:
            return self.location
        except (AttributeError, NotImplementedError, RuntimeError) as e:
            self.logger.warning(f"Location services unavailable: {e}")
            return None

    def _dispatch_auth_event(self, event, session):
        # Sign in and sign out complete on worker threads
        self.loop.call_soon_threadsafe(self.on_auth_state_change, event, session)

    def on_auth_state_change(self, event, session):
        """Switch between the login screen and the tabs as the session changes."""
        self.logger.info(f"Auth state change: {event}")
        if event in (SIGNED_IN, INITIAL_SESSION) and session:
            self.state.current_user = dict(session['user'])
            self.ui_manager.create_main_ui()
        elif event in (SIGNED_OUT, INITIAL_SESSION):
            self.state.clear_user_state()
            self.show_login()

    def show_login(self):
        """Show login UI."""
        self.login_ui = LoginUI(self)
        self.main_window.content = self.login_ui.layout

    def run_background(self, func, *args, on_done=None):
        """Run a blocking call on the executor.

        ``on_done(future)`` is called on the UI thread when the call finishes.
        """
        future = self.executor.submit(func, *args)
        if on_done is not None:
            future.add_done_callback(lambda f: self.loop.call_soon_threadsafe(on_done, f))
        return future

    def show_info(self, title, message):
        return self.main_window.dialog(toga.InfoDialog(title, message))

    def show_error(self, title, message):
        return self.main_window.dialog(toga.ErrorDialog(title, message))

    def confirm(self, title, message):
        """Awaitable that resolves True when the user confirms."""
        return self.main_window.dialog(toga.ConfirmDialog(title, message))

    def install_error_handlers(self):
        """Log every unhandled error; on native platforms also tell the user."""
        previous_hook = sys.excepthook

        def excepthook(exc_type, exc, tb):
            self.logger.critical("Unhandled exception", exc_info=(exc_type, exc, tb))
            self._report_fatal()
            previous_hook(exc_type, exc, tb)

        def loop_exception_handler(loop, context):
            exc = context.get('exception')
            self.logger.error(f"Unhandled error in event loop: {context.get('message')}",
                              exc_info=(type(exc), exc, exc.__traceback__) if exc else None)
            self._report_fatal()

        sys.excepthook = excepthook
        asyncio.get_event_loop().set_exception_handler(loop_exception_handler)

    def _report_fatal(self):
        if self.platform != NATIVE or getattr(self, 'main_window', None) is None:
            return
        try:
            self.show_error(FATAL_ERROR_TITLE, FATAL_ERROR_MESSAGE)
        except Exception as e:
            self.logger.error(f"Could not show error dialog: {e}")

    def on_exit(self):
        self.logger.info("Shutting down")
        if hasattr(self, '_unsubscribe_auth'):
            self._unsubscribe_auth()
        self.map_handler.close()
        self.executor.shutdown(wait=False)
        return True


def main():
    return RestroomApp()
