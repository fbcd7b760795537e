"""Lightweight payload validation utilities for build requests.

Shared by the HTTP blueprint and the Socket.IO handlers; provides minimal
schema-like checking with clear, consistent error responses.

Design goals:
- Fast, small, explicit; not a general JSON Schema implementation.
- Return (ok, value_or_error) tuples; caller decides whether to emit an error event
  or answer 400.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'number', 'bool', 'list', 'dict'; unions as 'int|str'.
Extras examples:
  max_len / min_len (str), allow_empty (str)
  min / max (int, number)
  item_type (list element primitive type), max_items (list)

Example:
 schema = {
   'width': ('int', True, {'min': 1, 'max': 512})
 }
 ok, data_or_err = validate(data, schema)

If invalid: (False, {'field': 'width', 'error': 'above maximum', 'code': 'max'})
If valid: (True, normalized_data)
"""
from __future__ import annotations
from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': (str,),
    'int': (int,),
    'number': (int, float),
    'bool': (bool,),
    'list': (list,),
    'dict': (dict,),
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def _matches(value: Any, type_name: str) -> bool:
    # bool is an int subclass; only 'bool' accepts it
    if isinstance(value, bool):
        return type_name == 'bool'
    return isinstance(value, PRIMITIVES[type_name])


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        if not isinstance(spec, tuple) or len(spec) < 2:
            return _fail('__schema__', f'invalid spec for {name}', 'schema')
        type_spec, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        type_names = type_spec.split('|')
        for t in type_names:
            if t not in PRIMITIVES:
                return _fail('__schema__', f'unsupported type {t}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        matched = next((t for t in type_names if _matches(value, t)), None)
        if matched is None:
            return _fail(name, f'expected {type_spec}', 'type')
        if matched == 'str':
            s = value.strip() if not extras.get('allow_empty') else value
            if not extras.get('allow_empty') and len(s) == 0:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(value) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            if 'min_len' in extras and len(value) < extras['min_len']:
                return _fail(name, 'too short', 'min_len')
            out[name] = s
        elif matched in ('int', 'number'):
            if 'min' in extras and value < extras['min']:
                return _fail(name, 'below minimum', 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, 'above maximum', 'max')
            out[name] = value
        elif matched == 'list':
            if 'max_items' in extras and len(value) > extras['max_items']:
                return _fail(name, 'too many items', 'max_items')
            item_type = extras.get('item_type')
            if item_type:
                if item_type not in PRIMITIVES:
                    return _fail('__schema__', f'unsupported item_type {item_type}', 'schema')
                for idx, elem in enumerate(value):
                    if not _matches(elem, item_type):
                        return _fail(name, f'element {idx} not {item_type}', 'item_type')
            out[name] = value
        else:
            out[name] = value
    return True, out


def build_schema(max_dimension: int) -> Dict[str, tuple]:
    """Schema for a dungeon build request, bounded by ``max_dimension`` cells per side."""
    return {
        'width': ('int', False, {'min': 1, 'max': max_dimension}),
        'height': ('int', False, {'min': 1, 'max': max_dimension}),
        'mask': ('list', False, {'item_type': 'str', 'max_items': max_dimension}),
        'room_grid_size': ('int', False, {'min': 1, 'max': 1024}),
        'wiggle': ('number', False, {'min': 0, 'max': 1}),
        'frequency': ('number', False, {'max': 1}),
        'seed': ('int|str', False, {'max_len': 128}),
        'ticks_per_frame': ('int', False, {'min': 1, 'max': 1000}),
    }
