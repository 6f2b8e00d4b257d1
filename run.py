"""
Main interface for user/developer of btreemap.

Utility to start repl and run commands.

Requires btreemap to be installed.
"""

import sys

from btreemap import parse_args_and_start


if __name__ == '__main__':
    sys.exit(parse_args_and_start(sys.argv[1:]))
