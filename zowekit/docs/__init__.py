"""Documentation generation for the zowekit CLI."""

from zowekit.docs.help_pages import HelpPageGenerator, generate_help_pages

__all__ = ["HelpPageGenerator", "generate_help_pages"]
