import toga
from toga.style import Pack
from toga.style.pack import COLUMN
from shared.validation import Validator

SIGNUP_ERROR_MESSAGES = [
    ('User already registered', 'An account with this email already exists. Try signing in instead.'),
    ('Invalid email', 'Please enter a valid email address.'),
    ('Password should be at least', 'Password must be at least 6 characters long.'),
    ('Username', 'This username is already taken. Please choose another one.'),
]


def validate_registration(email, password, username):
    """Form check before calling the data service; returns an error message or None."""
    if not email or not password or not username:
        return 'Please fill in all fields'
    if len(password) < Validator.MIN_PASSWORD_LENGTH:
        return f'Password must be at least {Validator.MIN_PASSWORD_LENGTH} characters'
    return None


def friendly_signup_error(message):
    """Map a data service sign-up error to the text shown on the form."""
    if not message:
        return 'Failed to create account'
    for needle, friendly in SIGNUP_ERROR_MESSAGES:
        if needle in message:
            return friendly
    return message


class LoginUI:
    def __init__(self, app):
        self.app = app
        self.layout = self.create_layout()

    def create_layout(self):
        main_box = toga.Box(style=Pack(direction=COLUMN, padding=20))

        main_box.add(toga.Label("Restroom Finder", style=Pack(padding=(0, 0, 20, 0), font_size=20, font_weight='bold', text_align='center')))

        self.email_input = toga.TextInput(placeholder="Email", style=Pack(padding=(0, 0, 10, 0)))
        self.password_input = toga.PasswordInput(placeholder="Password", style=Pack(padding=(0, 0, 20, 0)))

        self.login_button = toga.Button("Sign In", on_press=self.login, style=Pack(padding=(0, 0, 10, 0)))
        self.register_button = toga.Button("Create Account", on_press=self.show_register, style=Pack(padding=(0, 0, 10, 0)))

        self.status_label = toga.Label("", style=Pack(color='red', text_align='center'))

        main_box.add(self.email_input)
        main_box.add(self.password_input)
        main_box.add(self.login_button)
        main_box.add(self.register_button)
        main_box.add(self.status_label)

        return main_box

    def login(self, widget):
        email = (self.email_input.value or '').strip()
        password = self.password_input.value

        if not email or not password:
            self.status_label.text = "Please enter email and password"
            return

        self.status_label.text = "Signing in..."
        self.login_button.enabled = False
        self.app.run_background(self.app.auth_service.sign_in, email, password, on_done=self._on_login_complete)

    def _on_login_complete(self, future):
        """Handle sign-in completion on main thread.

        On success the auth state listener swaps in the main UI.
        """
        self.login_button.enabled = True
        try:
            success, error = future.result()
            if not success:
                self.status_label.text = error
        except Exception as e:
            self.status_label.text = f"Login error: {str(e)}"

    def show_register(self, widget):
        self.registration_ui = RegistrationUI(self.app, self)
        self.app.main_window.content = self.registration_ui.layout


class RegistrationUI:
    def __init__(self, app, login_ui):
        self.app = app
        self.login_ui = login_ui
        self.layout = self.create_layout()

    def create_layout(self):
        main_box = toga.Box(style=Pack(direction=COLUMN, padding=20))

        main_box.add(toga.Label("Join Our Community", style=Pack(padding=(0, 0, 5, 0), font_size=20, font_weight='bold', text_align='center')))
        main_box.add(toga.Label("Help others find clean, accessible restrooms", style=Pack(padding=(0, 0, 20, 0), text_align='center', color='#666666')))

        self.username_input = toga.TextInput(placeholder="Username", style=Pack(padding=(0, 0, 10, 0)))
        self.email_input = toga.TextInput(placeholder="Email", style=Pack(padding=(0, 0, 10, 0)))
        self.password_input = toga.PasswordInput(placeholder="Password (at least 6 characters)", style=Pack(padding=(0, 0, 20, 0)))

        self.register_button = toga.Button("Create Account", on_press=self.register, style=Pack(padding=(0, 0, 10, 0)))
        self.cancel_button = toga.Button("Back to Sign In", on_press=self.cancel, style=Pack(padding=(0, 0, 10, 0)))

        self.status_label = toga.Label("", style=Pack(color='red', text_align='center'))

        main_box.add(self.username_input)
        main_box.add(self.email_input)
        main_box.add(self.password_input)
        main_box.add(self.register_button)
        main_box.add(self.cancel_button)
        main_box.add(self.status_label)

        return main_box

    def cancel(self, widget):
        self.app.main_window.content = self.login_ui.layout

    def register(self, widget):
        username = (self.username_input.value or '').strip()
        email = (self.email_input.value or '').strip()
        password = self.password_input.value

        error = validate_registration(email, password, username)
        if error:
            self.status_label.text = error
            return

        self.status_label.text = "Creating account..."
        self.register_button.enabled = False
        self.app.run_background(self.app.auth_service.sign_up, email, password, username,
                                on_done=self._on_register_complete)

    def _on_register_complete(self, future):
        """Handle registration completion on main thread."""
        self.register_button.enabled = True
        try:
            success, error = future.result()
            if success:
                self.app.show_info("Welcome", "Account created successfully! Welcome to the community.")
            else:
                self.status_label.text = friendly_signup_error(error)
        except Exception as e:
            self.status_label.text = f"Registration error: {str(e)}"
