import json
import logging
import os
import requests
from datetime import datetime, timezone
from pathlib import Path
from appdirs import user_data_dir

SIGNED_IN = 'SIGNED_IN'
SIGNED_OUT = 'SIGNED_OUT'
INITIAL_SESSION = 'INITIAL_SESSION'


class AuthService:
    """Session-based authentication against the data service.

    The session ({access_token, expires_at, user}) is persisted as JSON in the
    user data directory so the app starts signed in.
    """

    def __init__(self, api_base_url, timeout=10, data_dir=None):
        self.api_base_url = api_base_url.rstrip('/')
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session = None
        self._listeners = []
        self.data_dir = Path(data_dir or user_data_dir("restroom_app", "restroomfinder"))
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.session_file = self.data_dir / "auth_session.json"
        self._load_session()

    @property
    def token(self):
        return self.session['access_token'] if self.session else None

    @property
    def user(self):
        return self.session['user'] if self.session else None

    def _load_session(self):
        if not self.session_file.exists():
            return
        try:
            with open(self.session_file, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Ignoring unreadable session file: {e}")
            return
        if not data.get('access_token') or self._is_expired(data.get('expires_at')):
            self.logger.info("Stored session missing or expired")
            self._clear_session()
            return
        self.session = data

    def _save_session(self):
        with open(self.session_file, 'w') as f:
            json.dump(self.session, f)

    def _clear_session(self):
        self.session = None
        if self.session_file.exists():
            os.remove(self.session_file)

    @staticmethod
    def _is_expired(expires_at):
        if not expires_at:
            return False
        try:
            expiry = datetime.fromisoformat(expires_at)
        except ValueError:
            return True
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        return expiry <= datetime.now(timezone.utc)

    def _start_session(self, data):
        self.session = {
            'access_token': data['access_token'],
            'expires_at': data.get('expires_at'),
            'user': data['user'],
        }
        self._save_session()
        self._notify(SIGNED_IN)

    def sign_up(self, email, password, username):
        """Register and sign in. Returns (ok, error)."""
        try:
            resp = requests.post(f"{self.api_base_url}/api/auth/signup", json={
                'email': email,
                'password': password,
                'username': username,
            }, timeout=self.timeout)

            if resp.status_code == 201:
                self._start_session(resp.json())
                self.logger.info(f"Signed up as {username}")
                return True, None
            return False, self._error(resp, 'Registration failed')
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Sign up error: {e}")
            return False, f"Connection error: {str(e)}"

    def sign_in(self, email, password):
        """Sign in with email and password. Returns (ok, error)."""
        try:
            resp = requests.post(f"{self.api_base_url}/api/auth/token", json={
                'email': email,
                'password': password,
            }, timeout=self.timeout)

            if resp.status_code == 200:
                self._start_session(resp.json())
                self.logger.info(f"Signed in as {self.user.get('username')}")
                return True, None
            return False, self._error(resp, 'Login failed')
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Sign in error: {e}")
            return False, f"Connection error: {str(e)}"

    def sign_out(self):
        """Invalidate the session remotely and forget it locally. Returns (ok, error)."""
        error = None
        if self.token:
            try:
                requests.post(f"{self.api_base_url}/api/auth/logout", headers=self.get_headers(),
                              timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                # The local session is dropped either way
                self.logger.warning(f"Remote sign out failed: {e}")
                error = f"Connection error: {str(e)}"
        self._clear_session()
        self._notify(SIGNED_OUT)
        return error is None, error

    def get_session(self):
        """Current local session dict, or None."""
        if self.session and self._is_expired(self.session.get('expires_at')):
            self._clear_session()
            self._notify(SIGNED_OUT)
        return self.session

    def get_current_user(self):
        """The signed-in user as {id, email, username}, or None.

        When the profile lookup fails for reasons other than a rejected
        token, the cached identity is returned without a username.
        """
        if not self.get_session():
            return None

        cached = self.user or {}
        try:
            resp = requests.get(f"{self.api_base_url}/api/auth/user", headers=self.get_headers(),
                                timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Profile fetch error: {e}")
            return {'id': cached.get('id'), 'email': cached.get('email'), 'username': None}

        if resp.status_code == 401:
            self.logger.info("Session rejected by the data service")
            self._clear_session()
            self._notify(SIGNED_OUT)
            return None
        if not resp.ok:
            self.logger.error(f"Profile fetch error: {resp.status_code}")
            return {'id': cached.get('id'), 'email': cached.get('email'), 'username': None}

        profile = resp.json()
        return {
            'id': profile.get('id'),
            'email': profile.get('email'),
            'username': profile.get('username'),
            'restrooms_added': profile.get('restrooms_added', 0),
            'reviews_written': profile.get('reviews_written', 0),
        }

    def on_auth_state_change(self, callback):
        """Subscribe to SIGNED_IN/SIGNED_OUT events.

        The callback is called immediately with INITIAL_SESSION. Returns a
        function that removes the subscription.
        """
        self._listeners.append(callback)
        callback(INITIAL_SESSION, self.session)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def _notify(self, event):
        for callback in list(self._listeners):
            try:
                callback(event, self.session)
            except Exception as e:
                self.logger.error(f"Auth listener failed on {event}: {e}", exc_info=True)

    def _error(self, resp, default):
        try:
            return resp.json().get('error', default)
        except ValueError:
            return default

    def get_headers(self):
        if self.token:
            return {'Authorization': f'Bearer {self.token}'}
        return {}

    def is_authenticated(self):
        return self.get_session() is not None
