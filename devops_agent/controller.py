"""Form controller holding the pipeline generator UI state"""
import threading
import uuid
from collections import OrderedDict

from .formatter import format_explanation
from .models import (
    DEFAULT_FILES, PipelineArtifact, PipelineRequest, PipelineResponse, PipelineState
)


class PipelineController:
    """Owns one user's form values, current result and display flags.

    State changes only through the methods below. Submissions are numbered;
    a response is applied only if no later submission has been applied yet,
    so a slow earlier request can never overwrite a newer result.
    """

    def __init__(self, client):
        self.client = client
        self.repository_url = ''
        self.platform = ''
        self.files = DEFAULT_FILES
        self.response = PipelineResponse()
        self.show_explanation = False
        self._lock = threading.Lock()
        self._sequence = 0
        self._applied_sequence = 0
        self._in_flight = 0

    @property
    def loading(self):
        with self._lock:
            return self._in_flight > 0

    def update_form(self, repository_url=None, platform=None, files=None):
        """Record the latest form values so the page can re-render them"""
        with self._lock:
            if repository_url is not None:
                self.repository_url = repository_url
            if platform is not None:
                self.platform = platform
            if files is not None:
                self.files = files

    def submit(self, pipeline_request):
        """Send a request to the generator and apply the response.

        Raises PipelineError subclasses; on error the current response is
        left untouched.
        """
        with self._lock:
            self._sequence += 1
            sequence = self._sequence
            self._in_flight += 1

        print(f"[GENERATE] #{sequence} {pipeline_request.repository_url or '(no repository)'} "
              f"platform={pipeline_request.platform or '(none)'} files={pipeline_request.files}")
        response = None
        try:
            response = self.client.generate(pipeline_request)
        finally:
            # loading only drops once the response is in place
            with self._lock:
                applied = response is not None and self._apply_response(sequence, response)
                self._in_flight -= 1

        if applied:
            print(f"[GENERATE] #{sequence} complete ({len(response.yaml)} bytes of YAML)")
        else:
            print(f"[GENERATE] #{sequence} discarded, a later response was already applied")
        return response

    def _apply_response(self, sequence, response):
        """Install a response unless a later one is already applied; caller holds the lock"""
        if sequence < self._applied_sequence:
            return False
        self._applied_sequence = sequence
        self.response = response
        self.show_explanation = False
        return True

    def submit_form(self, repository_url, platform, files):
        """Record form values and submit them; files may be a list or a comma-separated string"""
        pipeline_request = PipelineRequest.from_form(repository_url, platform, files)
        if not isinstance(files, str):
            files = ','.join(pipeline_request.files)
        self.update_form(pipeline_request.repository_url, pipeline_request.platform, files)
        return self.submit(pipeline_request)

    def download(self, yaml_text=None):
        """Build the downloadable pipeline file, defaulting to the current YAML"""
        if yaml_text is None:
            yaml_text = self.response.yaml
        return PipelineArtifact(yaml_text.encode('utf-8'))

    def toggle_explanation(self):
        with self._lock:
            self.show_explanation = not self.show_explanation
            return self.show_explanation

    def explanation_blocks(self):
        return format_explanation(self.response.explanation)

    def state(self):
        with self._lock:
            return PipelineState(
                repository_url=self.repository_url,
                platform=self.platform,
                files=self.files,
                yaml=self.response.yaml,
                explanation=self.response.explanation,
                show_explanation=self.show_explanation,
                loading=self._in_flight > 0,
            )


class ControllerRegistry:
    """Per-session controllers, keyed by an opaque client id.

    Holds at most max_controllers entries; the least recently used one is
    evicted when a new session would exceed the cap.
    """

    DEFAULT_MAX_CONTROLLERS = 1000

    def __init__(self, client_factory, max_controllers=DEFAULT_MAX_CONTROLLERS):
        if max_controllers < 1:
            raise ValueError('max_controllers must be at least 1')
        self.client_factory = client_factory
        self.max_controllers = max_controllers
        self._controllers = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def new_client_id():
        return uuid.uuid4().hex

    def get(self, client_id):
        """Return the controller for client_id, creating it on first use"""
        with self._lock:
            controller = self._controllers.get(client_id)
            if controller is None:
                controller = PipelineController(self.client_factory())
                self._controllers[client_id] = controller
                while len(self._controllers) > self.max_controllers:
                    evicted_id, _ = self._controllers.popitem(last=False)
                    print(f"[SESSION] Evicted idle session {evicted_id}")
            else:
                self._controllers.move_to_end(client_id)
            return controller

    def peek(self, client_id):
        """Return the controller for client_id without creating one"""
        if not client_id:
            return None
        with self._lock:
            controller = self._controllers.get(client_id)
            if controller is not None:
                self._controllers.move_to_end(client_id)
            return controller

    def empty_controller(self):
        """An unregistered controller for sessions that have not submitted yet"""
        return PipelineController(self.client_factory())

    def __len__(self):
        with self._lock:
            return len(self._controllers)
