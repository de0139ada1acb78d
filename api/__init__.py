"""
API Module for BananaStudio
JSON endpoints the studio page uses to drive the session controller
"""

from .endpoints import api_bp, get_controller, state_payload
from .models import create_error_response, create_success_response, ERROR_CODES

__all__ = ['api_bp', 'get_controller', 'state_payload', 'create_error_response', 'create_success_response', 'ERROR_CODES']
