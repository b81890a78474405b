"""Profile screen handlers for RestroomApp."""
import logging


def profile_fields(user):
    """Display strings for the profile header and stats."""
    user = user or {}
    username = user.get('username')
    return {
        'username': username or 'User',
        'email': user.get('email') or '',
        'initial': (username or user.get('email') or '?')[0].upper(),
        'restrooms_added': str(user.get('restrooms_added') or 0),
        'reviews_written': str(user.get('reviews_written') or 0),
    }


class ProfileHandler:
    """Shows the signed-in user and handles sign-out."""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)
        self.profile = None
        from ..ui.profile_view import ProfileView
        self.view = ProfileView(self)

    def create_content(self):
        content = self.view.create_content()
        self.view.show_profile(self.app.state.current_user)
        self.load_profile()
        return content

    def load_profile(self, widget=None):
        self.app.run_background(self.app.auth_service.get_current_user, on_done=self._on_profile_loaded)

    def _on_profile_loaded(self, future):
        try:
            profile = future.result()
        except Exception as e:
            self.logger.error(f"Error loading profile: {e}")
            return
        if profile is None:
            # Session was rejected; the auth listener shows the login screen
            return
        self.profile = profile
        self.view.show_profile(profile)

    async def sign_out(self, widget=None, **kwargs):
        confirmed = await self.app.confirm('Sign Out', 'Are you sure you want to sign out?')
        if not confirmed:
            return
        self.logger.info("Signing out")
        self.app.run_background(self.app.auth_service.sign_out, on_done=self._on_sign_out_complete)

    def _on_sign_out_complete(self, future):
        try:
            ok, error = future.result()
        except Exception as e:
            self.logger.error(f"Sign out error: {e}")
            self.app.show_error('Error', 'Failed to sign out')
            return
        if not ok:
            # Local session is already cleared
            self.logger.warning(f"Sign out incomplete: {error}")
        self.profile = None
