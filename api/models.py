"""
API Response Models
Standard success/error envelopes for the studio API
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any

# Error codes for different types of failures
ERROR_CODES = {
    'VALIDATION_001': 'Missing required parameter',
    'VALIDATION_002': 'Invalid file type',
    'VALIDATION_003': 'File too large',
    'VALIDATION_004': 'Invalid parameter value',
    'PROCESSING_001': 'Prompt generation failed',
    'PROCESSING_002': 'Image generation failed',
    'SERVICE_003': 'Internal processing error',
    'FILE_001': 'File not found',
}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_error_response(error_code: str, details: Optional[str] = None, **extra) -> Dict[str, Any]:
    """
    Create standardized error response

    Args:
        error_code: Error code from ERROR_CODES
        details: Additional error details
        **extra: additional top-level fields (e.g. the studio state)

    Returns:
        dict: Error response dictionary
    """
    response = {
        'success': False,
        'error': ERROR_CODES.get(error_code, 'Unknown error'),
        'error_code': error_code,
        'details': details,
        'timestamp': _timestamp(),
    }
    response.update(extra)
    return response


def create_success_response(message: str, state: Optional[Dict[str, Any]] = None, **extra) -> Dict[str, Any]:
    """
    Create standardized success response

    Args:
        message: Success message
        state: Studio state snapshot
        **extra: additional top-level fields

    Returns:
        dict: Success response dictionary
    """
    response = {
        'success': True,
        'message': message,
        'timestamp': _timestamp(),
    }
    if state is not None:
        response['state'] = state
    response.update(extra)
    return response
