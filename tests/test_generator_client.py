"""Tests for the pipeline generator HTTP client."""
import pytest
import requests

from devops_agent.generator_client import (
    GeneratorClient, ServerError, TransportError, TRANSPORT_ERROR_MESSAGE
)
from devops_agent.models import PipelineRequest

from .conftest import GENERATOR_URL, make_response


@pytest.fixture
def generator():
    return GeneratorClient(GENERATOR_URL + '/')


@pytest.fixture
def pipeline_request():
    return PipelineRequest.from_form('https://github.com/a/b', 'vercel', 'requirements.txt, app.py')


class TestGenerate:

    def test_posts_json_to_generate_endpoint(self, generator, pipeline_request, mock_post, sample_payload):
        mock_post.return_value = make_response(200, sample_payload)

        generator.generate(pipeline_request)

        mock_post.assert_called_once_with(
            'http://generator.test/generate-cicd',
            json={
                'repo_url': 'https://github.com/a/b',
                'platform': 'vercel',
                'files': ['requirements.txt', 'app.py'],
            },
            headers={'Content-Type': 'application/json'},
            timeout=None
        )

    def test_success_returns_response(self, generator, pipeline_request, mock_post, sample_payload):
        mock_post.return_value = make_response(200, sample_payload)

        response = generator.generate(pipeline_request)

        assert response.yaml == 'name: CI\non: push'
        assert response.explanation == '**Step 1: Install**\n* Run pip install'

    def test_missing_fields_default_to_empty(self, generator, pipeline_request, mock_post):
        mock_post.return_value = make_response(200, {'yaml': 'on: push', 'explanation': None})

        response = generator.generate(pipeline_request)

        assert response.yaml == 'on: push'
        assert response.explanation == ''

    def test_malformed_json_defaults_to_empty(self, generator, pipeline_request, mock_post):
        mock_post.return_value = make_response(200, text='<html>not json</html>')

        response = generator.generate(pipeline_request)

        assert response.to_dict() == {'yaml': '', 'explanation': ''}

    def test_configured_timeout_is_passed(self, pipeline_request, mock_post, sample_payload):
        mock_post.return_value = make_response(200, sample_payload)

        GeneratorClient(GENERATOR_URL, timeout=12.5).generate(pipeline_request)

        assert mock_post.call_args.kwargs['timeout'] == 12.5


class TestErrors:

    def test_server_error_carries_body(self, generator, pipeline_request, mock_post):
        mock_post.return_value = make_response(500, text='internal error')

        with pytest.raises(ServerError) as excinfo:
            generator.generate(pipeline_request)

        assert excinfo.value.status_code == 500
        assert excinfo.value.body == 'internal error'
        assert str(excinfo.value) == 'Error 500: internal error'

    def test_client_error_status_is_server_error(self, generator, pipeline_request, mock_post):
        mock_post.return_value = make_response(422, text='{"detail": "bad platform"}')

        with pytest.raises(ServerError, match='bad platform'):
            generator.generate(pipeline_request)

    @pytest.mark.parametrize('exc', [
        requests.exceptions.ConnectionError('refused'),
        requests.exceptions.Timeout('slow'),
    ])
    def test_transport_failure(self, generator, pipeline_request, mock_post, exc):
        mock_post.side_effect = exc

        with pytest.raises(TransportError) as excinfo:
            generator.generate(pipeline_request)

        assert str(excinfo.value) == TRANSPORT_ERROR_MESSAGE
        assert excinfo.value.cause is exc
