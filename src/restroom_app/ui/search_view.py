"""Search screen UI."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from .components import create_restroom_card, card_fields

RATING_CHOICES = ['Any rating', '1+', '2+', '3+', '4+', '5']


class SearchView:
    """Widgets for the search screen; logic lives in SearchHandler."""

    def __init__(self, handler):
        self.handler = handler
        self.app = handler.app

    def create_content(self):
        header = toga.Label('Search Restrooms', style=Pack(font_size=20, font_weight='bold', padding=(10, 10, 0, 10)))
        subtitle = toga.Label('Find the perfect restroom for your needs', style=Pack(color='#666666', padding=(0, 10, 10, 10)))

        self.search_input = toga.TextInput(placeholder='Search by location, name, or landmark...',
                                           on_confirm=self.handler.search, style=Pack(flex=1, padding=5))
        self.search_button = toga.Button('Search', on_press=self.handler.search, style=Pack(padding=5))
        clear_button = toga.Button('Clear', on_press=self.handler.clear_search, style=Pack(padding=5))
        search_row = toga.Box(children=[self.search_input, self.search_button, clear_button],
                              style=Pack(direction=ROW, padding=(0, 5)))

        self.filter_count_label = toga.Label('Filters', style=Pack(padding=5, font_weight='bold'))
        self.accessible_switch = toga.Switch(
            'Wheelchair Accessible', on_change=lambda w: self.handler.toggle_filter('accessible', w.value),
            style=Pack(padding=5))
        self.free_access_switch = toga.Switch(
            'Free Access', on_change=lambda w: self.handler.toggle_filter('free_access', w.value),
            style=Pack(padding=5))
        self.rating_selection = toga.Selection(
            items=RATING_CHOICES, on_change=self._on_rating_change, style=Pack(padding=5))
        clear_filters_button = toga.Button('Clear All', on_press=self.handler.clear_filters, style=Pack(padding=5))
        filters_box = toga.Box(
            children=[
                toga.Box(children=[self.filter_count_label, clear_filters_button], style=Pack(direction=ROW)),
                self.accessible_switch, self.free_access_switch, self.rating_selection,
            ],
            style=Pack(direction=COLUMN, padding=(0, 10)),
        )

        self.message_label = toga.Label('', style=Pack(padding=(5, 10), color='#EF4444'))
        self.results_box = toga.Box(style=Pack(direction=COLUMN, padding=(0, 10)))
        results_scroll = toga.ScrollContainer(content=self.results_box, horizontal=False, style=Pack(flex=1))

        return toga.Box(children=[header, subtitle, search_row, filters_box, self.message_label, results_scroll],
                        style=Pack(direction=COLUMN, flex=1))

    def _on_rating_change(self, widget):
        value = widget.value or RATING_CHOICES[0]
        self.handler.set_min_rating(RATING_CHOICES.index(value))

    def get_query(self):
        return self.search_input.value

    def clear_query(self):
        self.search_input.value = ''
        self.message_label.text = ''

    def set_busy(self, busy):
        self.search_button.enabled = not busy
        self.search_button.text = 'Searching...' if busy else 'Search'

    def show_message(self, text):
        self.message_label.text = text

    def update_filter_count(self, count):
        self.filter_count_label.text = f'Filters ({count})' if count else 'Filters'

    def reset_filters(self):
        self.accessible_switch.value = False
        self.free_access_switch.value = False
        self.rating_selection.value = RATING_CHOICES[0]

    def show_results(self, restrooms):
        self.results_box.clear()
        if not restrooms:
            if (self.search_input.value or '').strip():
                self.message_label.text = ('No restrooms found. Try searching with different keywords '
                                           'or adjust your filters')
            return
        self.message_label.text = f'{len(restrooms)} restrooms found'
        for restroom in restrooms:
            self.results_box.add(create_restroom_card(restroom, on_press=self.handler.select_result))

    def show_details(self, restroom):
        fields = card_fields(restroom)
        lines = [fields['address'], fields['rating']]
        for key in ('hours', 'accessible', 'requirements', 'description', 'distance'):
            if fields[key]:
                lines.append(fields[key])
        self.app.show_info(fields['title'], '\n'.join(lines))
