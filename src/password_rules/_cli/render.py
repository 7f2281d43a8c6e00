from typing import Optional

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from ..character_class import NAMED_CLASSES, CharacterClass
from ..rule import Rule

UNSET = Text("unset", style="dim")

# bracket classes longer than this are summarised by their member count only
MAX_PREVIEW_CHARS = 32


def _render_optional(value: Optional[object]) -> RenderableType:
    return UNSET if value is None else Text(str(value))


def _render_class(char_class: CharacterClass) -> Text:
    count = len(char_class.included)
    label = Text(char_class.name, style="steel_blue3")

    if char_class.name in NAMED_CLASSES or count > MAX_PREVIEW_CHARS:
        label.append(f" ({count} chars)")

    return label


def compose_rule_table(rule: Rule) -> Table:
    table = Table("Property", "Value", title="Password rule")

    table.add_row("min_length", _render_optional(rule.min_length))
    table.add_row("max_length", _render_optional(rule.max_length))
    table.add_row("max_consecutive", _render_optional(rule.max_consecutive))
    table.add_row("expires_after", _render_optional(rule.expires_after))

    if rule.required is None:
        table.add_row("required", UNSET)
    elif not rule.required:
        table.add_row("required", Text("none", style="dim"))
    else:
        for idx, char_class in enumerate(rule.required):
            table.add_row("required" if idx == 0 else "", _render_class(char_class))

    return table
