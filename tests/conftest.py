"""Shared fixtures for the Auto-DevOps Agent tests."""
import json
from unittest.mock import Mock, patch

import pytest

from devops_agent import create_app

GENERATOR_URL = 'http://generator.test'


def make_response(status_code=200, payload=None, text=None):
    """Build a stand-in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    if text is None:
        text = json.dumps(payload) if payload is not None else ''
    response.text = text
    if payload is not None:
        response.json.return_value = payload
    else:
        response.json.side_effect = ValueError('No JSON object could be decoded')
    return response


@pytest.fixture
def app():
    """Flask app pointed at a fake generator."""
    return create_app({
        'TESTING': True,
        'SECRET_KEY': 'test',
        'GENERATOR_URL': GENERATOR_URL,
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mock_post():
    """Patch the outbound POST to the generator."""
    with patch('devops_agent.generator_client.requests.post') as post:
        yield post


@pytest.fixture
def sample_payload():
    return {
        'yaml': 'name: CI\non: push',
        'explanation': '**Step 1: Install**\n* Run pip install',
    }
