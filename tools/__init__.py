"""
Tools — operation implementations.

Each tool has its own module with the implementation logic.
cli.py and server.py provide thin wrappers that call into these.

Operations:
- resolve / do_read: path → status (absence is None, not an error)
- list_directories / list_objects / walk: walk a subtree
- do_create / do_update / do_delete: mutate one notebook
- do_export: content in a given format
"""

from .resolve import resolve, do_read
from .walk import list_directories, list_objects, walk
from .create import do_create, create_from_settings
from .update import do_update, update_from_settings
from .delete import do_delete, delete_if_present
from .export import do_export, export_to_file

# Single source of truth for valid do() operation names.
OPERATIONS = frozenset({"create", "update", "delete"})

__all__ = [
    "resolve", "do_read", "list_directories", "list_objects", "walk",
    "do_create", "create_from_settings", "do_update", "update_from_settings",
    "do_delete", "delete_if_present", "do_export", "export_to_file", "OPERATIONS",
]
