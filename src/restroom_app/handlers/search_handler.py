"""Search screen handlers for RestroomApp."""
import logging

EMPTY_QUERY_MESSAGE = 'Please enter a search term'
SEARCH_FAILED_MESSAGE = 'Failed to search restrooms'


def default_filters():
    return {'accessible': False, 'free_access': False, 'min_rating': 0}


class SearchHandler:
    """Name/address search over restrooms near the user, with filters."""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)
        self.filters = default_filters()
        self.results = []
        self.loading = False
        from ..ui.search_view import SearchView
        self.view = SearchView(self)

    def create_content(self):
        return self.view.create_content()

    def toggle_filter(self, key, enabled=None):
        """Flip a boolean filter (or set it when ``enabled`` is given)."""
        if key not in ('accessible', 'free_access'):
            raise KeyError(key)
        self.filters[key] = (not self.filters[key]) if enabled is None else bool(enabled)
        self.view.update_filter_count(self.active_filter_count())

    def set_min_rating(self, rating):
        self.filters['min_rating'] = max(0, min(5, int(rating or 0)))
        self.view.update_filter_count(self.active_filter_count())

    def clear_filters(self, widget=None):
        self.filters = default_filters()
        self.view.reset_filters()
        self.view.update_filter_count(0)

    def active_filter_count(self):
        return sum(1 for value in self.filters.values() if value is True or (not isinstance(value, bool) and value > 0))

    def search_origin(self):
        """Current position if known, else the default map centre."""
        state = self.app.state
        if state.has_location:
            return state.current_latitude, state.current_longitude
        return self.app.config.default_latitude, self.app.config.default_longitude

    def search(self, widget=None):
        query = (self.view.get_query() or '').strip()
        if not query:
            self.view.show_message(EMPTY_QUERY_MESSAGE)
            return
        if self.loading:
            return

        latitude, longitude = self.search_origin()
        self.loading = True
        self.view.set_busy(True)
        self.app.run_background(
            self.app.restroom_service.search_restrooms,
            query, latitude, longitude, self.app.config.search_radius_meters, dict(self.filters),
            on_done=self._on_search_complete,
        )

    def _on_search_complete(self, future):
        self.loading = False
        self.view.set_busy(False)
        try:
            self.results = future.result()
        except Exception as e:
            self.logger.error(f"Search error: {e}")
            self.view.show_message(SEARCH_FAILED_MESSAGE)
            return
        self.view.show_results(self.results)

    def clear_search(self, widget=None):
        self.results = []
        self.view.clear_query()
        self.view.show_results([])

    def select_result(self, restroom):
        self.app.state.selected_restroom = restroom
        self.view.show_details(restroom)
