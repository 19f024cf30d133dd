"""Flask routes for the Auto-DevOps Agent"""
from functools import wraps

from flask import (
    Blueprint, Response, current_app, flash, jsonify, make_response, redirect,
    render_template, request, session, url_for
)

from .generator_client import PipelineError, ServerError
from .models import DEFAULT_FILES, SUPPORTED_PLATFORMS

bp = Blueprint('main', __name__)

ACTION_CHIPS = [
    {'label': 'Test', 'icon': '\U0001F9EA', 'style': 'chip-test'},
    {'label': 'Deploy', 'icon': '\U0001F680', 'style': 'chip-deploy'},
    {'label': 'More', 'icon': '…', 'style': 'chip-more'},
]


def get_controller():
    """Return the controller for the current browser session"""
    registry = current_app.extensions['devops_agent']
    client_id = session.get('client_id')
    if not client_id:
        client_id = registry.new_client_id()
        session['client_id'] = client_id
    return registry.get(client_id)


def find_controller():
    """Return the session's controller for read-only views without registering a new one"""
    registry = current_app.extensions['devops_agent']
    return registry.peek(session.get('client_id')) or registry.empty_controller()


def validate_generate_payload(data):
    """Return an error message if an /api/generate body is malformed, else None"""
    if not isinstance(data, dict):
        return 'Request body must be a JSON object'
    for field in ('repo_url', 'platform'):
        if data.get(field) is not None and not isinstance(data[field], str):
            return f'{field} must be a string'
    files = data.get('files')
    if files is None or isinstance(files, str):
        return None
    if not isinstance(files, list) or not all(isinstance(name, str) for name in files):
        return 'files must be a string or a list of strings'
    return None


def no_cache(f):
    """Decorator to add no-cache headers to responses"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        response = make_response(f(*args, **kwargs))
        response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate, max-age=0'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
        return response
    return decorated_function


def error_response(error):
    """JSON body for a failed generation"""
    body = {'success': False, 'error': str(error)}
    if isinstance(error, ServerError):
        body['status_code'] = error.status_code
    return jsonify(body), 502


# ============================================================================
# Page
# ============================================================================

@bp.route('/')
@no_cache
def index():
    """Pipeline generator form and result"""
    controller = find_controller()
    state = controller.state()
    blocks = []
    if state.show_explanation and state.has_result:
        blocks = controller.explanation_blocks()
    return render_template(
        'index.html',
        state=state,
        blocks=blocks,
        platforms=SUPPORTED_PLATFORMS,
        chips=ACTION_CHIPS,
    )


@bp.route('/generate', methods=['POST'])
def generate():
    """Handle the Generate Pipeline form submission"""
    controller = get_controller()
    try:
        controller.submit_form(
            request.form.get('repo_url', ''),
            request.form.get('platform', ''),
            request.form.get('files', DEFAULT_FILES),
        )
    except PipelineError as e:
        flash(str(e), 'error')
    return redirect(url_for('main.index'))


@bp.route('/toggle-explanation', methods=['POST'])
def toggle_explanation():
    """Show or hide the formatted explanation"""
    get_controller().toggle_explanation()
    return redirect(url_for('main.index'))


@bp.route('/download')
def download():
    """Download the current pipeline as ci-cd-pipeline.yml"""
    artifact = find_controller().download()
    response = Response(artifact.content, mimetype=artifact.mimetype)
    response.headers['Content-Disposition'] = f'attachment; filename={artifact.filename}'
    return response


# ============================================================================
# JSON API
# ============================================================================

@bp.route('/api/generate', methods=['POST'])
@no_cache
def api_generate():
    """Generate a pipeline from a JSON request"""
    data = request.get_json(silent=True)
    if data is None:
        data = {}

    error = validate_generate_payload(data)
    if error:
        return jsonify({
            'success': False,
            'error': error
        }), 400

    files = data.get('files')
    if files is None:
        files = DEFAULT_FILES

    try:
        response = get_controller().submit_form(
            data.get('repo_url') or '',
            data.get('platform') or '',
            files,
        )
    except PipelineError as e:
        return error_response(e)

    return jsonify({
        'success': True,
        'yaml': response.yaml,
        'explanation': response.explanation,
    })


@bp.route('/api/state')
@no_cache
def api_state():
    """Current form and result state"""
    return jsonify({
        'success': True,
        'state': find_controller().state().to_dict(),
    })


@bp.route('/api/toggle-explanation', methods=['POST'])
@no_cache
def api_toggle_explanation():
    """Flip explanation visibility"""
    return jsonify({
        'success': True,
        'show_explanation': get_controller().toggle_explanation(),
    })


@bp.route('/api/explanation')
@no_cache
def api_explanation():
    """Current explanation as formatted display blocks"""
    blocks = find_controller().explanation_blocks()
    return jsonify({
        'success': True,
        'blocks': [block.to_dict() for block in blocks],
    })


@bp.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'healthy'})
