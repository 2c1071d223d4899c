"""Change tree — directory/file hierarchy of a comparison and its text rendering."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Union

from branchdiff.engine.moves import MODIFIED_MOVED_MARKER, MOVED_MARKER
from branchdiff.git.models import FileChange, FileStatus, ReconciledStats

logger = logging.getLogger(__name__)

STATUS_ICON = {
    FileStatus.ADDED: "🆕",
    FileStatus.MODIFIED: "📝",
    FileStatus.DELETED: "🗑️",
    FileStatus.RENAMED: "📂",
}
DIRECTORY_ICON = "📁"


@dataclass
class FileNode:
    name: str
    change: FileChange

    @property
    def stats(self) -> ReconciledStats:
        return self.change.reconciled


@dataclass
class DirectoryNode:
    name: str
    children: Dict[str, "TreeNode"] = field(default_factory=dict)

    def files(self) -> List[FileNode]:
        """Every file node below this directory, depth first."""
        found: List[FileNode] = []
        for child in self.children.values():
            if isinstance(child, FileNode):
                found.append(child)
            else:
                found.extend(child.files())
        return found


TreeNode = Union[FileNode, DirectoryNode]


def _collision_key(name: str) -> str:
    return name + "/"


def build_tree(changes: Iterable[FileChange]) -> DirectoryNode:
    """Build the change tree. Children keep the order the changes arrive in.

    A file and a directory with the same name (a directory replaced by a
    file, or the reverse) are both kept; the directory moves to its own key.
    """
    root = DirectoryNode(name="")

    for change in changes:
        *dirs, file_name = change.path.split("/")
        current = root
        for part in dirs:
            key = part
            if isinstance(current.children.get(key), FileNode):
                key = _collision_key(part)
            node = current.children.get(key)
            if node is None:
                if key != part:
                    logger.warning("%s: directory %s shares its name with a file", change.path, part)
                node = DirectoryNode(name=part)
                current.children[key] = node
            current = node

        existing = current.children.get(file_name)
        if isinstance(existing, DirectoryNode):
            logger.warning("%s: file shares its name with a directory", change.path)
            current.children[_collision_key(file_name)] = current.children.pop(file_name)
        current.children[file_name] = FileNode(name=file_name, change=change)

    return root


def format_stats(change: FileChange) -> str:
    """Return the ``(+A, -D[, ○M][, ●N])`` suffix for a file line."""
    stats = f"(+{change.additions}, -{change.deletions}"
    if change.reconciled.moved_lines > 0:
        stats += f", {MOVED_MARKER}{change.reconciled.moved_lines}"
    if change.reconciled.modified_moved_lines > 0:
        stats += f", {MODIFIED_MOVED_MARKER}{change.reconciled.modified_moved_lines}"
    return stats + ")"


def format_file_line(node: FileNode) -> str:
    change = node.change
    icon = STATUS_ICON.get(change.status, "📄")
    name = node.name
    if change.status == FileStatus.RENAMED and change.old_path:
        name = f"{name} ← {posixpath.basename(change.old_path)}"
    return f"{icon} {name} {format_stats(change)}"


def render_tree(tree: DirectoryNode, prefix: str = "") -> str:
    """Render *tree* with ``├──``/``└──`` connectors, depth first."""
    lines: List[str] = []
    _render_into(tree, prefix, lines)
    return "\n".join(lines)


def _render_into(directory: DirectoryNode, prefix: str, lines: List[str]) -> None:
    entries = list(directory.children.values())
    for index, node in enumerate(entries):
        is_last = index == len(entries) - 1
        connector = "└── " if is_last else "├── "
        extension = "    " if is_last else "│   "

        if isinstance(node, FileNode):
            lines.append(f"{prefix}{connector}{format_file_line(node)}")
        else:
            lines.append(f"{prefix}{connector}{DIRECTORY_ICON} {node.name}")
            _render_into(node, prefix + extension, lines)
