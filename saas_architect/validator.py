# saas_architect/validator.py
"""
Shape validator for architecture blueprints returned by providers.

validate_blueprint(candidate) -> { valid, errors }

Only the top level is checked: role and table entries inside the arrays are
accepted as-is. Any error means the whole candidate must be discarded.
"""

from typing import Any, Dict, List

from jsonschema import Draft7Validator

BLUEPRINT_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": [
        "project_summary",
        "mvp_features",
        "future_features",
        "roles",
        "database_schema",
        "folder_structure",
    ],
    "properties": {
        "project_summary": {"type": "string", "minLength": 1},
        "mvp_features": {"type": "array"},
        "future_features": {"type": "array"},
        "roles": {"type": "array"},
        "database_schema": {"type": "array"},
        "folder_structure": {
            "type": "object",
            "required": ["frontend", "backend"],
            "properties": {
                "frontend": {"type": "array"},
                "backend": {"type": "array"},
            },
        },
    },
}

_VALIDATOR = Draft7Validator(BLUEPRINT_RESPONSE_SCHEMA)


def _describe(error) -> str:
    path = ".".join(str(p) for p in error.absolute_path)
    return f"{path}: {error.message}" if path else error.message


def validate_blueprint(candidate: Any) -> Dict[str, Any]:
    """
    Check a parsed JSON value against the blueprint shape.
    Returns {"valid": bool, "errors": [str]}; never raises.
    """
    errors: List[str] = [
        _describe(e) for e in sorted(_VALIDATOR.iter_errors(candidate), key=lambda e: [str(p) for p in e.absolute_path])
    ]
    return {"valid": len(errors) == 0, "errors": errors}
