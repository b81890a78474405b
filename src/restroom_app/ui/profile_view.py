import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from ..handlers.profile_handler import profile_fields


class ProfileView:
    def __init__(self, handler):
        self.handler = handler
        self.app = handler.app

    def _stat(self, label):
        value = toga.Label('0', style=Pack(font_size=20, font_weight='bold', text_align='center'))
        box = toga.Box(
            children=[value, toga.Label(label, style=Pack(color='#666666', text_align='center'))],
            style=Pack(direction=COLUMN, flex=1, padding=10),
        )
        return box, value

    def create_content(self):
        self.avatar_label = toga.Label('?', style=Pack(font_size=28, font_weight='bold', padding=10,
                                                       color='#FFFFFF', background_color='#2563EB'))
        self.username_label = toga.Label('', style=Pack(font_size=18, font_weight='bold'))
        self.email_label = toga.Label('', style=Pack(color='#666666'))
        header = toga.Box(
            children=[self.avatar_label,
                      toga.Box(children=[self.username_label, self.email_label],
                               style=Pack(direction=COLUMN, padding=(10, 10)))],
            style=Pack(direction=ROW, padding=10),
        )

        restrooms_box, self.restrooms_added_label = self._stat('Restrooms Added')
        reviews_box, self.reviews_written_label = self._stat('Reviews Written')
        stats = toga.Box(children=[restrooms_box, reviews_box], style=Pack(direction=ROW, padding=10))

        refresh_button = toga.Button('Refresh', on_press=self.handler.load_profile, style=Pack(padding=(5, 10)))
        sign_out_button = toga.Button('Sign Out', on_press=self.handler.sign_out,
                                      style=Pack(padding=(5, 10), color='#EF4444'))

        return toga.Box(children=[header, stats, refresh_button, sign_out_button],
                        style=Pack(direction=COLUMN, flex=1))

    def show_profile(self, user):
        fields = profile_fields(user)
        self.avatar_label.text = fields['initial']
        self.username_label.text = fields['username']
        self.email_label.text = fields['email']
        self.restrooms_added_label.text = fields['restrooms_added']
        self.reviews_written_label.text = fields['reviews_written']
