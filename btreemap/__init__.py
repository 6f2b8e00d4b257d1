from .btree import Entry, Node, Tree, InvalidNodeError
from .interface import BTreeMapShell, parse_args_and_start, repl, run_file
