"""Data models for pipeline requests, responses and explanation blocks"""

DEFAULT_FILES = 'requirements.txt,app.py'
PIPELINE_FILENAME = 'ci-cd-pipeline.yml'
PIPELINE_MIMETYPE = 'text/yaml'

SUPPORTED_PLATFORMS = {
    '': {'name': 'Select platform...'},
    'vercel': {'name': 'Vercel'},
    'streamlit': {'name': 'Streamlit'},
}


def split_files(files):
    """Split a comma-separated file list, trimming each entry"""
    return [name.strip() for name in files.split(',')]


class PipelineRequest:
    """A single submission to the pipeline generator."""

    def __init__(self, repository_url, platform, files):
        self.repository_url = repository_url
        self.platform = platform
        self.files = list(files)

    @classmethod
    def from_form(cls, repository_url, platform, files):
        """Build a request from raw form values; files may be a list or a comma-separated string"""
        if isinstance(files, str):
            files = split_files(files)
        return cls(repository_url or '', platform or '', files)

    def to_payload(self):
        return {
            'repo_url': self.repository_url,
            'platform': self.platform,
            'files': self.files,
        }


class PipelineResponse:
    """Pipeline YAML and explanation returned by the generator."""

    def __init__(self, yaml='', explanation=''):
        self.yaml = yaml
        self.explanation = explanation

    @classmethod
    def from_payload(cls, data):
        """Build a response from decoded JSON; missing or empty fields become ''"""
        if not isinstance(data, dict):
            data = {}
        return cls(
            yaml=_as_text(data.get('yaml')),
            explanation=_as_text(data.get('explanation')),
        )

    def to_dict(self):
        return {'yaml': self.yaml, 'explanation': self.explanation}


def _as_text(value):
    if not value:
        return ''
    return value if isinstance(value, str) else str(value)


class PipelineArtifact:
    """A downloadable pipeline file."""

    def __init__(self, content, filename=PIPELINE_FILENAME, mimetype=PIPELINE_MIMETYPE):
        self.content = content
        self.filename = filename
        self.mimetype = mimetype


class PipelineState:
    """Snapshot of a controller's form and result state."""

    def __init__(self, repository_url, platform, files, yaml, explanation, show_explanation, loading):
        self.repository_url = repository_url
        self.platform = platform
        self.files = files
        self.yaml = yaml
        self.explanation = explanation
        self.show_explanation = show_explanation
        self.loading = loading

    @property
    def has_result(self):
        return bool(self.yaml)

    def to_dict(self):
        return {
            'repo_url': self.repository_url,
            'platform': self.platform,
            'files': self.files,
            'yaml': self.yaml,
            'explanation': self.explanation,
            'show_explanation': self.show_explanation,
            'loading': self.loading,
        }


# ============================================================================
# Explanation display blocks
# ============================================================================

class Segment:
    """A run of paragraph text, optionally emphasized."""

    def __init__(self, text, emphasized=False):
        self.text = text
        self.emphasized = emphasized

    def __eq__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return self.text == other.text and self.emphasized == other.emphasized

    def __repr__(self):
        return f'Segment({self.text!r}, emphasized={self.emphasized})'

    def to_dict(self):
        return {'text': self.text, 'emphasized': self.emphasized}


class DisplayBlock:
    """Base class for formatted explanation blocks."""

    kind = None

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'{type(self).__name__}({self.to_dict()!r})'

    def to_dict(self):
        raise NotImplementedError


class Heading(DisplayBlock):
    kind = 'heading'

    def __init__(self, text):
        self.text = text

    def to_dict(self):
        return {'type': self.kind, 'text': self.text}


class BulletItem(DisplayBlock):
    kind = 'bullet'

    def __init__(self, text, emphasized_prefix=None):
        self.text = text
        self.emphasized_prefix = emphasized_prefix

    def to_dict(self):
        return {
            'type': self.kind,
            'emphasized_prefix': self.emphasized_prefix,
            'text': self.text,
        }


class Paragraph(DisplayBlock):
    kind = 'paragraph'

    def __init__(self, segments):
        self.segments = list(segments)

    @property
    def text(self):
        return ''.join(segment.text for segment in self.segments)

    def to_dict(self):
        return {
            'type': self.kind,
            'segments': [segment.to_dict() for segment in self.segments],
        }
