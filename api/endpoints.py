"""
API Endpoints
JSON routes behind the studio page. Each route forwards one user intent to
the session's StudioController and answers with the updated state.
"""

import io
import time
import traceback

from flask import Blueprint, current_app, jsonify, request, send_file, session

from bananastudio import settings as studio_settings
from bananastudio.config import get_gemini_api_key
from bananastudio.controller import StudioState
from bananastudio.errors import InvalidSettingError
from bananastudio.images import ImageHandle, ImageSlot

from .models import create_error_response, create_success_response
from .utils import DOWNLOAD_FILENAME, read_upload, validate_image_file

# Create API blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api/v1')

SESSION_KEY = 'studio_id'
UPLOADABLE_SLOTS = (ImageSlot.PRODUCT, ImageSlot.STYLE)


def get_controller(create=True):
    """
    Controller for the current browser session

    Args:
        create: start a session when there is none; read-only routes pass
            False and get None instead

    Returns:
        StudioController or None
    """
    registry = current_app.extensions['bananastudio']
    session_id = session.get(SESSION_KEY)
    if not session_id:
        if not create:
            return None
        session_id = registry.new_session_id()
        session[SESSION_KEY] = session_id
    return registry.get(session_id, create=create)


def state_payload():
    controller = get_controller(create=False)
    state = controller.snapshot() if controller is not None else StudioState()
    return state.to_dict()


def _request_fields():
    """JSON object body or form fields; None when the JSON body is not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    return data if isinstance(data, dict) else None


def _parse_slot(slot_name, allowed=tuple(ImageSlot)):
    try:
        slot = ImageSlot(slot_name)
    except ValueError:
        return None
    return slot if slot in allowed else None


@api_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        'status': 'healthy',
        'timestamp': time.time(),
        'services': {
            'gemini_configured': bool(get_gemini_api_key()),
            'active_sessions': len(current_app.extensions['bananastudio']),
        }
    })


@api_bp.route('/state', methods=['GET'])
def get_state():
    return jsonify(create_success_response('Current studio state', state_payload()))


@api_bp.route('/settings/options', methods=['GET'])
def settings_options():
    return jsonify(create_success_response('Available studio settings', options=studio_settings.options()))


@api_bp.route('/settings', methods=['PUT', 'POST'])
def update_settings():
    data = _request_fields()
    if data is None:
        return jsonify(create_error_response('VALIDATION_004', 'Request body must be a JSON object')), 400
    changes = {key: data[key] for key in studio_settings.SETTING_FIELDS if data.get(key)}
    unknown = [key for key in data if key not in studio_settings.SETTING_FIELDS]
    if unknown:
        return jsonify(create_error_response('VALIDATION_004', f"Unknown settings: {', '.join(unknown)}")), 400
    try:
        get_controller().update_settings(**changes)
    except InvalidSettingError as e:
        return jsonify(create_error_response('VALIDATION_004', str(e))), 400
    return jsonify(create_success_response('Settings updated', state_payload()))


@api_bp.route('/images/<slot_name>', methods=['POST'])
def upload_image(slot_name):
    slot = _parse_slot(slot_name, UPLOADABLE_SLOTS)
    if slot is None:
        return jsonify(create_error_response('VALIDATION_004', f"Cannot upload to slot '{slot_name}'")), 400

    # Either a multipart file or JSON {"image": "<data URL or base64>"}
    payload = _request_fields()
    if payload is None:
        return jsonify(create_error_response('VALIDATION_004', 'Request body must be a JSON object')), 400
    image_file = request.files.get('image')
    if image_file:
        is_valid, error_msg = validate_image_file(image_file)
        if not is_valid:
            return jsonify(create_error_response('VALIDATION_002', error_msg)), 400
        image = read_upload(image_file)
    elif payload.get('image'):
        try:
            image = ImageHandle.from_base64(str(payload['image']), payload.get('mime_type') or 'image/png')
        except ValueError as e:
            return jsonify(create_error_response('VALIDATION_002', str(e))), 400
    else:
        return jsonify(create_error_response('VALIDATION_001', 'Image file is required')), 400

    get_controller().upload_image(slot, image)
    return jsonify(create_success_response(f'{slot.value.capitalize()} image uploaded', state_payload()))


@api_bp.route('/images/<slot_name>', methods=['GET'])
def get_image(slot_name):
    slot = _parse_slot(slot_name)
    controller = get_controller(create=False)
    image = controller.snapshot().image(slot) if slot and controller is not None else None
    if image is None:
        return jsonify(create_error_response('FILE_001', f"No image in slot '{slot_name}'")), 404
    return send_file(io.BytesIO(image.data), mimetype=image.mime_type, max_age=0)


@api_bp.route('/images/<slot_name>', methods=['DELETE'])
def clear_image(slot_name):
    slot = _parse_slot(slot_name)
    if slot is None:
        return jsonify(create_error_response('VALIDATION_004', f"Unknown slot '{slot_name}'")), 400
    controller = get_controller(create=False)
    if controller is not None:
        controller.clear_image(slot)
    return jsonify(create_success_response(f'{slot.value.capitalize()} image cleared', state_payload()))


@api_bp.route('/prompt', methods=['PUT', 'POST'])
def set_prompt():
    data = _request_fields()
    if data is None:
        return jsonify(create_error_response('VALIDATION_004', 'Request body must be a JSON object')), 400
    if 'prompt' not in data:
        return jsonify(create_error_response('VALIDATION_001', 'prompt is required')), 400
    get_controller().set_prompt(str(data['prompt']))
    return jsonify(create_success_response('Prompt updated', state_payload()))


@api_bp.route('/prompt/generate', methods=['POST'])
def generate_prompt():
    try:
        controller = get_controller(create=False)
        attempted = controller is not None and controller.generate_prompt()
        state = state_payload()
    except Exception as e:
        print(f"Error in prompt/generate: {e}")
        print(traceback.format_exc())
        return jsonify(create_error_response('SERVICE_003', str(e))), 500

    if attempted and state['processing']['error']:
        return jsonify(create_error_response('PROCESSING_001', state['processing']['error'],
                                             state=state, attempted=True)), 502
    message = 'Scene prompt generated' if attempted else 'Prompt generation skipped'
    return jsonify(create_success_response(message, state, attempted=attempted))


@api_bp.route('/render', methods=['POST'])
def render_image():
    try:
        controller = get_controller(create=False)
        attempted = controller is not None and controller.generate_image()
        state = state_payload()
    except Exception as e:
        print(f"Error in render: {e}")
        print(traceback.format_exc())
        return jsonify(create_error_response('SERVICE_003', str(e))), 500

    if attempted and state['processing']['error']:
        return jsonify(create_error_response('PROCESSING_002', state['processing']['error'],
                                             state=state, attempted=True)), 502
    message = 'Render complete' if attempted else 'Render skipped'
    return jsonify(create_success_response(message, state, attempted=attempted))


@api_bp.route('/new-shoot', methods=['POST'])
def new_shoot():
    controller = get_controller(create=False)
    if controller is not None:
        controller.new_shoot()
    return jsonify(create_success_response('Ready for a new shoot', state_payload()))


@api_bp.route('/download', methods=['GET'])
def download_render():
    controller = get_controller(create=False)
    data = controller.download() if controller is not None else None
    if data is None:
        return jsonify(create_error_response('FILE_001', 'No render available yet')), 404
    return send_file(io.BytesIO(data), mimetype='image/png', as_attachment=True,
                     download_name=DOWNLOAD_FILENAME, max_age=0)
