"""
Zowekit Help Pages

Renders the click command tree as a set of static HTML pages plus a
``tree-nodes.js`` navigation index for a web help viewer.

Pages:
- cli_root_help.html: description of the CLI and a summary of its groups
- <group>.html, <group>_<command>.html, ...: one page per group and command
"""

import html
import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.text import Text

from zowekit.logging import get_logger

logger = get_logger(__name__)

ROOT_PAGE = "cli_root_help.html"
TREE_FILE = "tree-nodes.js"

_PAGE_HEAD = '<link rel="stylesheet" href="../css/github.css" />\n<article class="markdown-body">\n'
_PAGE_TAIL = "</article>\n"


def _render_help(command: click.Command, ctx: click.Context) -> str:
    """Help text of ``command`` as an HTML fragment."""
    recorder = Console(record=True, file=io.StringIO(), width=100, color_system=None)
    recorder.print(Text(command.get_help(ctx)))
    return recorder.export_html(inline_styles=True, code_format="<pre>{code}</pre>\n")


def _aliases(group: click.Group) -> Dict[str, List[str]]:
    """Map command name -> aliases registered on ``group``."""
    result: Dict[str, List[str]] = {}
    for alias, name in getattr(group, "aliases", {}).items():
        result.setdefault(name, []).append(alias)
    return result


def _children(group: click.Group) -> List[click.Command]:
    """Subcommands sorted by name, each listed once."""
    seen = set()
    children = []
    for command in sorted(group.commands.values(), key=lambda c: c.name or ""):
        if command.name in seen:
            continue
        seen.add(command.name)
        children.append(command)
    return children


def _summary_list(group: click.Group, href_prefix: str) -> str:
    aliases = _aliases(group)
    items = []
    for child in _children(group):
        label = " | ".join([child.name] + aliases.get(child.name, []))
        summary = child.get_short_help_str(limit=120).rstrip(".")
        items.append(f'<li><a href="{href_prefix}{child.name}.html">{html.escape(label)}</a> - {html.escape(summary)}</li>')
    return "<ul>\n" + "\n".join(items) + "\n</ul>\n"


def _breadcrumb(root_name: str, full_name: str) -> str:
    crumbs = [f'<a href="{ROOT_PAGE}">{html.escape(root_name)}</a>']
    prefix = ""
    for part in full_name.split("_"):
        crumbs.append(f'<a href="{prefix}{part}.html">{html.escape(part)}</a>')
        prefix += f"{part}_"
    return " -&gt; ".join(crumbs)


class HelpPageGenerator:
    """
    Walks a click command tree and writes one HTML page per group and command.

    Example:
        count = HelpPageGenerator(cli, "zowekit").generate(Path("docs/cmd_docs"))
    """

    def __init__(self, root: click.Group, root_name: str = "zowekit", description: Optional[str] = None) -> None:
        self.root = root
        self.root_name = root_name
        self.description = description if description is not None else (root.help or "")
        self.alias_list: Dict[str, List[str]] = {}
        self.page_count = 0

    def generate(self, output_dir: Path, tree_file: Optional[Path] = None) -> int:
        """
        Write every page into ``output_dir`` and the tree index next to it.

        Args:
            output_dir: Directory receiving the HTML pages (created if missing)
            tree_file: Where to write tree-nodes.js (default: output_dir/tree-nodes.js)

        Returns:
            Number of group and command pages generated
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        self.alias_list = {}
        self.page_count = 0

        root_node: Dict[str, Any] = {"id": ROOT_PAGE, "text": self.root_name, "children": []}
        root_ctx = click.Context(self.root, info_name=self.root_name)
        self._write_root_page(output_dir)

        root_aliases = _aliases(self.root)
        for child in _children(self.root):
            self._write_page(output_dir, child, child.name, root_ctx, root_node, root_aliases.get(child.name, []))

        target = tree_file or output_dir / TREE_FILE
        target.write_text(
            "const treeNodes = " + json.dumps([root_node], indent=2) + ";\n"
            "const aliasList = " + json.dumps(self.alias_list, indent=2) + ";",
            encoding="utf-8",
        )
        logger.info("help_pages_generated", extra={"pages": self.page_count, "output_dir": str(output_dir)})
        return self.page_count

    def _write_root_page(self, output_dir: Path) -> None:
        content = (
            _PAGE_HEAD
            + f'<h2><a href="{ROOT_PAGE}">{html.escape(self.root_name)}</a></h2>\n'
            + f"<p>{html.escape(self.description)}</p>\n"
            + "<h4>Groups</h4>\n"
            + _summary_list(self.root, "")
            + _PAGE_TAIL
        )
        (output_dir / ROOT_PAGE).write_text(content, encoding="utf-8")

    def _write_page(
        self,
        output_dir: Path,
        command: click.Command,
        full_name: str,
        parent_ctx: click.Context,
        tree: Dict[str, Any],
        aliases: List[str],
    ) -> None:
        self.page_count += 1
        ctx = click.Context(command, info_name=command.name, parent=parent_ctx)
        content = _PAGE_HEAD + f"<h2>{_breadcrumb(self.root_name, full_name)}</h2>\n" + _render_help(command, ctx)
        if isinstance(command, click.Group):
            content += "<h4>Commands</h4>\n" + _summary_list(command, f"{full_name}_")
        content += _PAGE_TAIL

        filename = f"{full_name}.html"
        (output_dir / filename).write_text(content, encoding="utf-8")
        logger.debug("help_page_written", extra={"page": filename})

        node: Dict[str, Any] = {"id": filename, "text": " | ".join([command.name] + aliases), "children": []}
        tree["children"].append(node)
        for alias in aliases:
            names = self.alias_list.setdefault(alias, [])
            if command.name not in names:
                names.append(command.name)

        if isinstance(command, click.Group):
            child_aliases = _aliases(command)
            for child in _children(command):
                self._write_page(
                    output_dir, child, f"{full_name}_{child.name}", ctx, node, child_aliases.get(child.name, [])
                )


def generate_help_pages(root: click.Group, output_dir: Path, root_name: str = "zowekit") -> int:
    """Generate the help pages of ``root`` into ``output_dir``; returns the page count."""
    return HelpPageGenerator(root, root_name).generate(Path(output_dir))
