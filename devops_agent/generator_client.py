"""HTTP client for the remote CI/CD pipeline generator."""
import requests

from .models import PipelineResponse

DEFAULT_GENERATOR_URL = 'https://web-production-abd3.up.railway.app'
GENERATE_PATH = '/generate-cicd'
TRANSPORT_ERROR_MESSAGE = 'Server error occurred. Please try again.'


class PipelineError(Exception):
    """Base class for pipeline generation failures."""


class TransportError(PipelineError):
    """The request could not be sent or no response was received."""

    def __init__(self, message=TRANSPORT_ERROR_MESSAGE, cause=None):
        super().__init__(message)
        self.cause = cause


class ServerError(PipelineError):
    """The generator answered with a non-success status."""

    def __init__(self, status_code, body):
        super().__init__(f'Error {status_code}: {body}')
        self.status_code = status_code
        self.body = body


class GeneratorClient:
    """Client for the pipeline generator's /generate-cicd endpoint."""

    def __init__(self, base_url=DEFAULT_GENERATOR_URL, timeout=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    @property
    def endpoint(self):
        return f'{self.base_url}{GENERATE_PATH}'

    def generate(self, pipeline_request):
        """POST a PipelineRequest and return the PipelineResponse.

        Raises TransportError when no response arrives and ServerError
        when the status is outside 2xx.
        """
        try:
            response = requests.post(
                self.endpoint,
                json=pipeline_request.to_payload(),
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            print(f"[GENERATE] Error generating pipeline: {e!r}")
            raise TransportError(cause=e) from e

        if not 200 <= response.status_code < 300:
            raise ServerError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            data = {}
        return PipelineResponse.from_payload(data)
