"""
Listing extractor — pure function, no I/O.

Converts walk results into a markdown listing.
Directories first, then objects grouped by type.
"""

from collections import defaultdict

from models import DirectoryDescriptor, ObjectStatus


def extract_listing_content(
    root: str,
    directories: list[DirectoryDescriptor],
    objects: list[ObjectStatus] | None = None,
    recursive: bool = False,
) -> str:
    """
    Convert a walk under ``root`` into markdown.

    Args:
        root: The path the walk started from
        directories: From tools.walk.list_directories()
        objects: Optional non-directory objects from tools.walk.list_objects()
        recursive: Whether the walk descended (only changes the heading)

    Returns:
        Markdown string with a directories section and, when objects were
        given, one section per object type.
    """
    scope = "recursive" if recursive else "direct children"
    lines: list[str] = [f"# {root} ({scope})", ""]

    # --- Directories ---
    lines.append(f"## Directories ({len(directories)})")
    lines.append("")
    if directories:
        for directory in directories:
            lines.append(f"- {directory.path}/")
    else:
        lines.append("**(none)**")
    lines.append("")

    if objects is None:
        return "\n".join(lines)

    # --- Objects ---
    if not objects:
        lines.append("## Objects")
        lines.append("")
        lines.append("**(none)**")
        lines.append("")
        return "\n".join(lines)

    by_type: dict[str, list[ObjectStatus]] = defaultdict(list)
    for obj in objects:
        by_type[obj.object_type.value if obj.object_type else "UNKNOWN"].append(obj)

    for type_name, members in sorted(by_type.items()):
        lines.append(f"## {type_name.title()} ({len(members)})")
        lines.append("")
        for obj in members:
            suffix = f" · {obj.language.value}" if obj.language else ""
            lines.append(f"- {obj.path}{suffix}")
        lines.append("")

    return "\n".join(lines)
