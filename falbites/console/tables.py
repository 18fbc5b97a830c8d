"""Plain text table rendering for the dashboard command"""
from .pages.base import lookup

MAX_AUTO_COLUMNS = 6
MAX_CELL_WIDTH = 40


def default_columns(items):
    """Scalar top-level keys of the first record, ``_id`` first"""
    if not items:
        return []
    first = items[0]
    keys = [key for key, value in first.items() if not isinstance(value, (dict, list))]
    if '_id' in keys:
        keys.remove('_id')
        keys.insert(0, '_id')
    return keys[:MAX_AUTO_COLUMNS]


def format_cell(value):
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'yes' if value else 'no'
    if isinstance(value, list):
        value = ', '.join(str(item) for item in value)
    text = str(value).replace('\n', ' ')
    if len(text) > MAX_CELL_WIDTH:
        text = text[:MAX_CELL_WIDTH - 3] + '...'
    return text


def render_table(items, columns=None):
    columns = list(columns or default_columns(items))
    if not columns:
        return '(no records)'
    rows = [[format_cell(lookup(item, column)) for column in columns] for item in items]
    widths = [
        max([len(column)] + [len(row[index]) for row in rows])
        for index, column in enumerate(columns)
    ]
    lines = [
        '  '.join(column.ljust(width) for column, width in zip(columns, widths)),
        '  '.join('-' * width for width in widths),
    ]
    lines.extend('  '.join(cell.ljust(width) for cell, width in zip(row, widths)) for row in rows)
    if not rows:
        lines.append('(no records)')
    return '\n'.join(line.rstrip() for line in lines)


def render_record(record):
    """``key: value`` lines; nested records are flattened with dotted keys"""
    lines = []

    def walk(value, prefix):
        if isinstance(value, dict):
            for key, item in value.items():
                walk(item, f"{prefix}.{key}" if prefix else key)
        else:
            lines.append(f"{prefix}: {format_cell(value) if not isinstance(value, list) else value}")

    walk(record or {}, '')
    return '\n'.join(lines)
