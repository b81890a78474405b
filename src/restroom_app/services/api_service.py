"""API service for HTTP client abstraction."""
import requests
import time
import logging


class APIError(Exception):
    """Non-2xx response from the data service."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class APIService:
    """HTTP client for data service calls with error handling and retry logic.

    Calls are blocking; handlers run them on the app's thread pool executor.
    """

    def __init__(self, base_url='http://localhost:5000', max_retries=3, retry_delay=1.0, timeout=10.0,
                 auth_service=None, access_token=None):
        self.base_url = base_url.rstrip('/')
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)
        self.auth_service = auth_service
        self.access_token = access_token

    def _get_auth_headers(self):
        """Get authorization headers for API requests.

        auth_service takes precedence over a fixed access_token.
        """
        headers = {}
        if self.auth_service:
            headers.update(self.auth_service.get_headers())
        elif self.access_token:
            headers['Authorization'] = f"Bearer {self.access_token}"
        return headers

    def _merge_headers(self, kwargs):
        """Merge auth headers with any provided headers in kwargs."""
        auth_headers = self._get_auth_headers()
        if not auth_headers:
            return kwargs

        existing_headers = kwargs.get('headers', {})
        if not isinstance(existing_headers, dict):
            existing_headers = {}

        kwargs['headers'] = {**existing_headers, **auth_headers}
        return kwargs

    def _make_request(self, method, url, **kwargs):
        """Make HTTP request with retry logic."""
        kwargs = self._merge_headers(kwargs)
        kwargs.setdefault('timeout', self.timeout)

        last_exception = None
        response = None

        for attempt in range(self.max_retries):
            try:
                response = requests.request(method, url, **kwargs)
                last_exception = None
                # Don't retry on client errors (4xx) except for specific cases
                if response.status_code >= 400 and response.status_code < 500:
                    if response.status_code not in [408, 429]:  # Retry timeout and rate limit
                        return response
                elif response.status_code < 500:
                    return response

                if attempt < self.max_retries - 1:
                    self.logger.warning(f"Request failed (attempt {attempt + 1}/{self.max_retries}): {response.status_code} {response.reason}")
                    time.sleep(self.retry_delay * (2 ** attempt))  # Exponential backoff

            except requests.exceptions.RequestException as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    self.logger.warning(f"Request exception (attempt {attempt + 1}/{self.max_retries}): {e}")
                    time.sleep(self.retry_delay * (2 ** attempt))  # Exponential backoff
                else:
                    self.logger.error(f"Request failed after {self.max_retries} attempts: {e}")

        # Retries exhausted on a retryable status: hand the last response back
        if response is not None and last_exception is None:
            return response
        if last_exception:
            raise last_exception
        raise requests.exceptions.RequestException("All retry attempts failed")

    def request_json(self, method, endpoint, **kwargs):
        """Perform a request and decode the JSON body.

        Raises:
            APIError: On a non-2xx response, carrying the service's error message
            requests.exceptions.RequestException: On transport failure
        """
        response = self._make_request(method.upper(), f"{self.base_url}{endpoint}", **kwargs)
        if not response.ok:
            raise APIError(self._error_message(response), response.status_code)
        if not response.content:
            return None
        return response.json()

    def _error_message(self, response):
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get('error'):
            return body['error']
        return f"{response.status_code} {response.reason}"
