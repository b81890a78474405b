"""Shared map state and platform detection."""
import logging
import toga
import toga.platform

logger = logging.getLogger(__name__)

NATIVE = 'native'
WEB = 'web'


def detect_platform(force=None):
    """'web' when running on the Toga web backend, else 'native'.

    Args:
        force: Optional override ('native' or 'web'), e.g. from configuration
    """
    if force in (NATIVE, WEB):
        return force
    return WEB if toga.platform.current_platform == 'web' else NATIVE


class MapContext:
    """Loading and error state shared by a map and the widgets around it.

    Subscribers are called with the context after every change.
    """

    def __init__(self, platform=None):
        self.platform = platform or detect_platform()
        self.is_loading = False
        self.error = None
        self._subscribers = []
        self.logger = logging.getLogger(self.__class__.__name__)

    def set_loading(self, loading):
        self.is_loading = bool(loading)
        self._notify()

    def set_error(self, error):
        """Record a MapError (or None); loading always stops."""
        if error is not None:
            self.logger.warning(f"Map error {error.code}: {error.message}")
        self.error = error
        self.is_loading = False
        self._notify()

    def clear_error(self):
        self.error = None
        self._notify()

    def subscribe(self, callback):
        """Register ``callback(context)``; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self):
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception as e:
                self.logger.error(f"Map context subscriber failed: {e}", exc_info=True)
