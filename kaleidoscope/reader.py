import sys

from .errors import UnreadableSource, UsageError

USAGE = 'usage: kaleidoscope <file>'


def fetch_code(argv=None):
    if argv is None:
        argv = sys.argv

    # err if missing a source file
    if len(argv) < 2:
        raise UsageError(USAGE)

    filename = argv[1]
    print(f'Reading code from: {filename}', file=sys.stderr)
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise UnreadableSource(f'{filename} is not valid UTF-8: {e.reason} at byte {e.start}') from e
