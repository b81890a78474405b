"""Map screen UI."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from .components import create_restroom_card


class MapScreenView:
    """Widgets for the map screen; logic lives in MapHandler."""

    def __init__(self, handler):
        self.handler = handler
        self.app = handler.app
        self.refresh_button = None
        self.status_label = None
        self.details_box = None

    def create_content(self, map_widget):
        self.my_location_button = toga.Button('My Location', on_press=self.handler.locate_user,
                                              style=Pack(padding=(5, 5, 5, 10)))
        self.refresh_button = toga.Button('Refresh', on_press=self.handler.refresh, style=Pack(padding=5))
        self.status_label = toga.Label('', style=Pack(flex=1, padding=(10, 10), color='#666666'))
        controls = toga.Box(
            children=[self.my_location_button, self.refresh_button, self.status_label],
            style=Pack(direction=ROW),
        )
        self.details_box = toga.Box(style=Pack(direction=COLUMN, padding=(0, 10)))
        return toga.Box(children=[controls, map_widget, self.details_box], style=Pack(direction=COLUMN, flex=1))

    def set_busy(self, busy):
        if self.refresh_button:
            self.refresh_button.enabled = not busy

    def set_status(self, text):
        if self.status_label:
            self.status_label.text = text

    def show_restroom(self, restroom):
        if self.details_box is None:
            return
        self.details_box.clear()
        self.details_box.add(create_restroom_card(restroom))
        self.details_box.add(toga.Button('Close', on_press=lambda w: self.details_box.clear(),
                                         style=Pack(padding=(5, 0))))
