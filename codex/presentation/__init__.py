"""
Presentation — Turning snapshot data into text

- Pretty: width-aware document layout with styled segments
- Env: display names for references inside rendered source
- Printer: term, type and declaration printers
- Render: DefinitionRenderer, the on-demand entry point
- Export: JSON for Names and the call graph
"""

from .pretty import SyntaxElement, render as layout, to_plain
from .env import PrettyPrintEnv
from .render import DefinitionRenderer, DefinitionKind, BUILTIN_TERM, BUILTIN_TYPE
from .export import names_to_json, graph_to_json
from .console import safe_print
