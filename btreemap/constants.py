# operational constants
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# logging
LOG_FORMAT = "[%(filename)s:%(lineno)s - %(funcName)s ] %(message)s"

# btree constants
# minimum degree, i.e. every non-root node holds [t-1, 2t-1] entries
# NOTE: this is kept small, so splits and merges are frequent during dev
DEFAULT_T = 2
# smallest t for which the btree invariants can hold
MIN_T = 2

USAGE = '''
Supported meta-commands:
------------------------
print usage
.help

quit REPl
> .quit

print btree
> .btree

performs internal consistency checks on btree
> .validate

replace btree with an empty btree (same minimum degree)
> .reset

Supported commands:
-------------------
Keys and values are literals: integers, reals, 'strings', "strings", true, false, null.
Keys of one tree must be mutually comparable. Multiple commands can be separated by ';'

Insert key, if it doesn't exist; outputs true or false
> insert 1 'apple'

Insert or update key; outputs previous value or null
> put 1 'orange'

Lookup key; outputs value or null
> get 1

Delete key; outputs deleted entry or null
> delete 1
'''
