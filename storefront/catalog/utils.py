"""
Utility functions for catalog payloads: media URLs, multi-line lists and colors
"""
import json
import re


COLOR_HEX_MAP = {
    'red': '#ff0000',
    'black': '#000000',
    'white': '#ffffff',
    'brown': '#8b4513',
    'grey': '#808080',
    'gray': '#808080',
    'blue': '#0000ff',
    'green': '#00ff00',
    'yellow': '#ffff00',
    'orange': '#ffa500',
    'purple': '#800080',
    'pink': '#ffc0cb',
    'silver': '#c0c0c0',
    'gold': '#ffd700',
    'beige': '#f5f5dc',
    'ivory': '#fffff0',
    'burgundy': '#800020',
    'navy': '#000080',
    'charcoal': '#36454f',
}
DEFAULT_COLOR_HEX = '#808080'

MULTI_LINE_SPLIT = re.compile(r'[\n\r|,\\]')


def absolute_media_url(path, request=None):
    """Turn a stored relative media path into an absolute URL for the current host"""
    if not path:
        return path
    if path.startswith('http'):
        return path
    clean_path = path if path.startswith('/') else f'/{path}'
    if request is None:
        return clean_path
    return request.build_absolute_uri(clean_path)


def clean_upload_path(path):
    """Store uploads as '/uploads/...' even when the client sends a full URL"""
    if path and '/uploads/' in path:
        return '/uploads/' + path.split('/uploads/', 1)[1]
    return path


def parse_multi_line(value):
    """
    Normalize list-ish input into a list of trimmed strings.

    Accepts a list (joined then re-split) or a string separated by
    newlines, commas, pipes or backslashes.
    """
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        value = '\n'.join(str(v) for v in value)
    if not isinstance(value, str):
        return []
    return [part.strip() for part in MULTI_LINE_SPLIT.split(value) if part.strip()]


def parse_json_field(value):
    """Decode a JSON-encoded form value; leave anything else untouched"""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def parse_colors(colors):
    """
    Normalize color input into [{'name', 'hex', 'images', ...}].

    Accepts plain names ("Black, Walnut"), a JSON string, a list of names,
    or a list of {name, hex} objects. Unknown names get a neutral hex.
    """
    if not colors:
        return []

    if isinstance(colors, str):
        try:
            return parse_colors(json.loads(colors))
        except ValueError:
            names = re.split(r'[,|\\]', colors)
            return [_color_from_name(name) for name in names if name.strip()]

    if isinstance(colors, (list, tuple)):
        parsed = []
        for color in colors:
            if isinstance(color, str):
                if color.strip():
                    parsed.append(_color_from_name(color))
            elif isinstance(color, dict) and color.get('name'):
                entry = dict(color)
                entry['name'] = entry['name'].strip()
                entry.setdefault('hex', COLOR_HEX_MAP.get(entry['name'].lower(), DEFAULT_COLOR_HEX))
                entry.setdefault('images', [])
                parsed.append(entry)
        return parsed

    return []


def _color_from_name(name):
    name = name.strip()
    return {'name': name, 'hex': COLOR_HEX_MAP.get(name.lower(), DEFAULT_COLOR_HEX), 'images': []}
