"""Lightweight JSON payload validation for the HTTP API.

Provides minimal schema-like checking with clear, consistent error bodies.
Not a general JSON Schema implementation.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'number', 'bool', 'list', 'dict', 'seed'
('seed' accepts an int or a non-empty string). Extras:
  max_len / min_len (str), min / max (int, number), item_type and
  length (list), choices (str)

Example:
 ok, data_or_err = validate({'algorithm': 'bfs'}, PATH_REQUEST)

If invalid: (False, {'field': 'algorithm', 'error': 'not one of ...', 'code': 'choices'})
If valid: (True, normalized_data)

``require`` is the raising variant used by route handlers; the app turns a
ValidationError into a 400 with the same body.
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

from explorer.services.pathfinding import STRATEGIES
from explorer.services.session import MOVEMENT_ACTIONS, TOGGLE_ACTIONS

PRIMITIVES = {
    'str': str,
    'int': int,
    'number': (int, float),
    'bool': bool,
    'list': list,
    'dict': dict,
    'seed': (int, str),
}


class ValidationError(Exception):
    def __init__(self, field: str, message: str, code: str):
        super().__init__(message)
        self.field = field
        self.message = message
        self.code = code

    def to_dict(self) -> Dict[str, str]:
        return {'field': self.field, 'error': self.message, 'code': self.code}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def _is_type(value: Any, type_name: str) -> bool:
    # bool is an int subclass; only accept it where asked for
    if isinstance(value, bool) and type_name != 'bool':
        return False
    return isinstance(value, PRIMITIVES[type_name])


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        if not isinstance(spec, tuple) or len(spec) < 2:
            return _fail('__schema__', f'invalid spec for {name}', 'schema')
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        if not _is_type(value, type_name):
            return _fail(name, f'expected {type_name}', 'type')
        if type_name in ('str', 'seed') and isinstance(value, str):
            s = value.strip()
            if len(s) == 0:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(s) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            if 'min_len' in extras and len(s) < extras['min_len']:
                return _fail(name, 'too short', 'min_len')
            if 'choices' in extras and s.lower() not in extras['choices']:
                return _fail(name, f"not one of {', '.join(sorted(extras['choices']))}", 'choices')
            out[name] = s
        elif type_name in ('int', 'number'):
            if 'min' in extras and value < extras['min']:
                return _fail(name, f"must be >= {extras['min']}", 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, f"must be <= {extras['max']}", 'max')
            out[name] = value
        elif type_name == 'list':
            if 'length' in extras and len(value) != extras['length']:
                return _fail(name, f"expected {extras['length']} elements", 'length')
            item_type = extras.get('item_type')
            if item_type:
                if item_type not in PRIMITIVES:
                    return _fail('__schema__', f'unsupported item_type {item_type}', 'schema')
                for idx, elem in enumerate(value):
                    if not _is_type(elem, item_type):
                        return _fail(name, f'element {idx} not {item_type}', 'item_type')
            out[name] = value
        else:
            out[name] = value
    return True, out


def require(payload: Any, schema: Dict[str, tuple]) -> Dict[str, Any]:
    ok, data = validate(payload, schema)
    if not ok:
        raise ValidationError(data['field'], data['error'], data['code'])
    return data


def _valid_action(action: str) -> bool:
    if action in MOVEMENT_ACTIONS or action in TOGGLE_ACTIONS:
        return True
    return action.startswith('select_algorithm:') and len(action) > len('select_algorithm:')


def require_action(payload: Any) -> Dict[str, Any]:
    data = require(payload, SESSION_INPUT)
    data['action'] = data['action'].lower()
    if not _valid_action(data['action']):
        raise ValidationError('action', 'unknown action', 'choices')
    return data


CELL = ('list', True, {'length': 2, 'item_type': 'int'})

# Predefined schemas used by handlers
PATH_REQUEST = {
    'seed': ('seed', True),
    'algorithm': ('str', False, {'choices': STRATEGIES}),
    'start': CELL,
    'goal': ('list', False, {'length': 2, 'item_type': 'int'}),
}
SEED_REQUEST = {
    'seed': ('seed', False, {'max_len': 128}),
}
SESSION_CREATE = {
    'seed': ('seed', False, {'max_len': 128}),
    'algorithm': ('str', False, {'choices': STRATEGIES}),
    'clock': ('str', False, {'choices': {'monotonic', 'manual'}}),
}
SESSION_INPUT = {
    'action': ('str', True, {'min_len': 1, 'max_len': 64}),
    'pressed': ('bool', False),
}
SESSION_TICK = {
    'now': ('number', False, {'min': 0}),
    'steps': ('int', False, {'min': 1, 'max': 1000}),
    'step_ms': ('number', False, {'min': 0}),
}
