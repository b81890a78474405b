"""Add-restroom form UI."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from shared.enums import AccessibilityFeature


class AddRestroomView:
    """Widgets for the add-restroom form; logic lives in AddRestroomHandler."""

    def __init__(self, handler):
        self.handler = handler
        self.app = handler.app
        self.feature_switches = {}

    def _labelled(self, text, widget):
        return toga.Box(
            children=[toga.Label(text, style=Pack(padding=(10, 0, 2, 0), font_weight='bold')), widget],
            style=Pack(direction=COLUMN),
        )

    def create_content(self):
        box = toga.Box(style=Pack(direction=COLUMN, padding=10))
        box.add(toga.Label('Add a Restroom', style=Pack(font_size=20, font_weight='bold', padding=(0, 0, 10, 0))))

        self.name_input = toga.TextInput(placeholder='e.g. Central Park Restroom')
        self.address_input = toga.TextInput(placeholder='Street address')
        self.location_button = toga.Button(
            'Use My Location', on_press=self.handler.use_my_location,
            style=Pack(padding=(5, 0, 0, 0)))
        self.location_label = toga.Label('', style=Pack(color='#666666', padding=(2, 0)))
        self.description_input = toga.MultilineTextInput(placeholder='Where is it, what is it like?',
                                                         style=Pack(height=80))
        self.hours_input = toga.TextInput(placeholder='e.g. 6:00 AM - 10:00 PM')
        self.requirements_input = toga.TextInput(placeholder='e.g. Customers only, ask for key')

        box.add(self._labelled('Name *', self.name_input))
        address_box = self._labelled('Address *', self.address_input)
        address_box.add(self.location_button, self.location_label)
        box.add(address_box)
        box.add(self._labelled('Description', self.description_input))
        box.add(self._labelled('Operating Hours', self.hours_input))
        box.add(self._labelled('Access Requirements', self.requirements_input))

        box.add(toga.Label('Accessibility Features', style=Pack(padding=(10, 0, 2, 0), font_weight='bold')))
        self.feature_switches = {}
        for feature in AccessibilityFeature:
            switch = toga.Switch(feature.value, on_change=self._feature_changed(feature.value),
                                 style=Pack(padding=(2, 0)))
            self.feature_switches[feature.value] = switch
            box.add(switch)

        self.error_label = toga.Label('', style=Pack(color='#EF4444', padding=(10, 0, 0, 0)))
        self.success_label = toga.Label('', style=Pack(color='#059669', padding=(10, 0, 0, 0)))
        self.submit_button = toga.Button('Add Restroom', on_press=self.handler.submit, style=Pack(padding=(10, 0)))
        box.add(self.error_label, self.success_label, self.submit_button)

        return toga.ScrollContainer(content=box, horizontal=False, style=Pack(flex=1))

    def _feature_changed(self, feature):
        return lambda widget: self.handler.toggle_feature(feature, widget.value)

    def get_form_data(self):
        return {
            'name': self.name_input.value,
            'address': self.address_input.value,
            'description': self.description_input.value,
            'operating_hours': self.hours_input.value,
            'access_requirements': self.requirements_input.value,
        }

    def set_address(self, address):
        self.address_input.value = address

    def show_location(self, latitude, longitude):
        self.location_label.text = f'Location: {latitude:.5f}, {longitude:.5f}'

    def show_error(self, message):
        self.success_label.text = ''
        self.error_label.text = message

    def show_success(self, message):
        self.error_label.text = ''
        self.success_label.text = message

    def clear_messages(self):
        self.error_label.text = ''
        self.success_label.text = ''

    def set_busy(self, busy):
        self.submit_button.enabled = not busy
        self.submit_button.text = 'Adding...' if busy else 'Add Restroom'

    def reset_form(self):
        for widget in (self.name_input, self.address_input, self.description_input,
                       self.hours_input, self.requirements_input):
            widget.value = ''
        self.location_label.text = ''
        for switch in self.feature_switches.values():
            switch.value = False
