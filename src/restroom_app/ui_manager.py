"""UI Manager for Restroom Finder - builds the tabbed main screen."""
import toga
from toga.style import Pack


class UIManager:
    """Manages the main window content once a user is signed in."""

    TABS = (
        ('Map', 'map_handler'),
        ('Search', 'search_handler'),
        ('Add', 'add_restroom_handler'),
        ('Profile', 'profile_handler'),
    )

    def __init__(self, app):
        self.app = app
        self.main_window = None
        self.tabs = None

    def create_main_ui(self):
        """Create the main user interface."""
        if self.tabs is not None:
            # Signing in again rebuilds every tab
            self.app.map_handler.close()
        content = []
        for title, handler_name in self.TABS:
            handler = getattr(self.app, handler_name)
            content.append((title, handler.create_content()))
        self.tabs = toga.OptionContainer(content=content, style=Pack(flex=1))
        self.main_window.content = self.tabs
        return self.tabs
