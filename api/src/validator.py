"""JSON Schema validation for log entries posted to /api/logs."""

import jsonschema

LOG_ENTRY_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["category", "action"],
    "properties": {
        "category": {"type": "string", "minLength": 1, "maxLength": 50},
        "action": {"type": "string", "minLength": 1, "maxLength": 255},
        "details": {"type": "object"},
        "timestamp": {"type": "string"},
        "session_id": {"type": ["string", "null"], "maxLength": 100},
        "duration_ms": {"type": ["integer", "null"],
                        "minimum": -2147483648, "maximum": 2147483647},
        "cost": {"type": ["number", "null"]},
    },
}

MISSING_FIELDS_ERROR = "category and action are required"


class LogEntryValidator:
    def __init__(self, schema: dict = LOG_ENTRY_SCHEMA):
        self._validator = jsonschema.Draft202012Validator(schema)

    def validate(self, entry) -> tuple[bool, str | None]:
        """Validate a posted entry.

        Returns:
            tuple: (is_valid, error message or None)
        """
        if isinstance(entry, dict) and (not entry.get("category") or not entry.get("action")):
            return False, MISSING_FIELDS_ERROR

        errors = sorted(self._validator.iter_errors(entry), key=lambda e: list(e.path))
        if not errors:
            return True, None
        return False, "; ".join(_describe(error) for error in errors)


def _describe(error: jsonschema.ValidationError) -> str:
    if error.path:
        return f"{'.'.join(str(p) for p in error.path)}: {error.message}"
    return error.message
