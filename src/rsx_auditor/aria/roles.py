# src/rsx_auditor/aria/roles.py
"""
WAI-ARIA 1.2 role taxonomy.

Each row declares a role's superclasses and the properties the role itself adds;
inherited sets are resolved once, when the table is built.
"""
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Tuple

from pydantic import BaseModel, ConfigDict

from .attributes import GLOBAL_ARIA_ATTRIBUTES


class RoleDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    abstract: bool = False
    interactive: bool = False
    required_props: FrozenSet[str] = frozenset()
    allowed_props: FrozenSet[str] = frozenset()
    superclass_roles: FrozenSet[str] = frozenset()


INTERACTIVE_ROLES = frozenset({
    "button", "checkbox", "combobox", "gridcell", "link", "listbox", "menu", "menubar",
    "menuitem", "menuitemcheckbox", "menuitemradio", "option", "radio", "scrollbar",
    "searchbox", "slider", "spinbutton", "switch", "tab", "textbox", "treeitem",
})

_RANGE_VALUES = ("aria-valuemax", "aria-valuemin", "aria-valuenow", "aria-valuetext")
_POSITION = ("aria-posinset", "aria-setsize")
_CELL_POSITION = (
    "aria-colindex", "aria-colindextext", "aria-colspan",
    "aria-rowindex", "aria-rowindextext", "aria-rowspan",
)

# (name, abstract, superclasses, own supported props, own required props)
_ROLE_ROWS: Tuple[Tuple[str, bool, Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]], ...] = (
    # abstract
    ("roletype", True, (), (), ()),
    ("structure", True, ("roletype",), (), ()),
    ("widget", True, ("roletype",), (), ()),
    ("window", True, ("roletype",), ("aria-modal",), ()),
    ("command", True, ("widget",), (), ()),
    ("composite", True, ("widget",), ("aria-activedescendant",), ()),
    ("input", True, ("widget",), (), ()),
    ("section", True, ("structure",), (), ()),
    ("sectionhead", True, ("structure",), (), ()),
    ("landmark", True, ("section",), (), ()),
    ("range", True, ("structure",), _RANGE_VALUES, ()),
    ("select", True, ("composite", "group"), ("aria-orientation",), ()),

    # document structure
    ("alert", False, ("section",), (), ()),
    ("alertdialog", False, ("alert", "dialog"), (), ()),
    ("application", False, ("structure",), ("aria-activedescendant", "aria-expanded"), ()),
    ("article", False, ("document",), _POSITION, ()),
    ("blockquote", False, ("section",), (), ()),
    ("caption", False, ("section",), (), ()),
    ("cell", False, ("section",), _CELL_POSITION + ("aria-selected",), ()),
    ("code", False, ("section",), (), ()),
    ("columnheader", False, ("cell", "gridcell", "sectionhead"), ("aria-sort",), ()),
    ("definition", False, ("section",), (), ()),
    ("deletion", False, ("section",), (), ()),
    ("directory", False, ("list",), (), ()),
    ("document", False, ("structure",), (), ()),
    ("emphasis", False, ("section",), (), ()),
    ("feed", False, ("list",), (), ()),
    ("figure", False, ("section",), (), ()),
    ("generic", False, ("structure",), (), ()),
    ("group", False, ("section",), ("aria-activedescendant",), ()),
    ("heading", False, ("sectionhead",), ("aria-level",), ("aria-level",)),
    ("img", False, ("section",), (), ()),
    ("insertion", False, ("section",), (), ()),
    ("list", False, ("section",), (), ()),
    ("listitem", False, ("section",), ("aria-level",) + _POSITION, ()),
    ("log", False, ("section",), (), ()),
    ("marquee", False, ("section",), (), ()),
    ("math", False, ("section",), (), ()),
    ("meter", False, ("range",), (), ("aria-valuenow", "aria-valuemax", "aria-valuemin")),
    ("none", False, ("structure",), (), ()),
    ("note", False, ("section",), (), ()),
    ("paragraph", False, ("section",), (), ()),
    ("presentation", False, ("structure",), (), ()),
    ("row", False, ("group", "widget"),
     ("aria-colindex", "aria-colindextext", "aria-expanded", "aria-level", "aria-rowindex",
      "aria-rowindextext", "aria-selected") + _POSITION, ()),
    ("rowgroup", False, ("structure",), (), ()),
    ("rowheader", False, ("cell", "gridcell", "sectionhead"), ("aria-sort",), ()),
    ("separator", False, ("structure",), ("aria-orientation",) + _RANGE_VALUES, ()),
    ("status", False, ("section",), (), ()),
    ("strong", False, ("section",), (), ()),
    ("subscript", False, ("section",), (), ()),
    ("superscript", False, ("section",), (), ()),
    ("table", False, ("section",), ("aria-colcount", "aria-rowcount"), ()),
    ("tabpanel", False, ("section",), (), ()),
    ("term", False, ("section",), (), ()),
    ("time", False, ("section",), (), ()),
    ("timer", False, ("status",), (), ()),
    ("tooltip", False, ("section",), (), ()),

    # landmarks
    ("banner", False, ("landmark",), (), ()),
    ("complementary", False, ("landmark",), (), ()),
    ("contentinfo", False, ("landmark",), (), ()),
    ("form", False, ("landmark",), (), ()),
    ("main", False, ("landmark",), (), ()),
    ("navigation", False, ("landmark",), (), ()),
    ("region", False, ("landmark",), (), ()),
    ("search", False, ("landmark",), (), ()),

    # windows
    ("dialog", False, ("window",), (), ()),

    # widgets
    ("button", False, ("command",), ("aria-expanded", "aria-pressed"), ()),
    ("checkbox", False, ("input",),
     ("aria-checked", "aria-expanded", "aria-readonly", "aria-required"), ("aria-checked",)),
    ("combobox", False, ("input",),
     ("aria-activedescendant", "aria-autocomplete", "aria-expanded", "aria-orientation",
      "aria-readonly", "aria-required"),
     ("aria-controls", "aria-expanded")),
    ("grid", False, ("composite", "table"), ("aria-multiselectable", "aria-readonly"), ()),
    ("gridcell", False, ("cell", "widget"),
     ("aria-expanded", "aria-readonly", "aria-required", "aria-selected"), ()),
    ("link", False, ("command",), ("aria-expanded",), ()),
    ("listbox", False, ("select",),
     ("aria-expanded", "aria-multiselectable", "aria-readonly", "aria-required"), ()),
    ("menu", False, ("select",), (), ()),
    ("menubar", False, ("menu",), (), ()),
    ("menuitem", False, ("command",), ("aria-expanded",) + _POSITION, ()),
    ("menuitemcheckbox", False, ("menuitem",), ("aria-checked",), ("aria-checked",)),
    ("menuitemradio", False, ("menuitemcheckbox",), (), ("aria-checked",)),
    ("option", False, ("input",), ("aria-checked", "aria-selected") + _POSITION, ()),
    ("progressbar", False, ("range", "widget"), (), ()),
    ("radio", False, ("input",), ("aria-checked",) + _POSITION, ("aria-checked",)),
    ("radiogroup", False, ("select",), ("aria-readonly", "aria-required"), ()),
    ("scrollbar", False, ("range", "widget"), ("aria-orientation",), ("aria-controls", "aria-valuenow")),
    ("searchbox", False, ("textbox",), (), ()),
    ("slider", False, ("input", "range"), ("aria-orientation", "aria-readonly"), ("aria-valuenow",)),
    ("spinbutton", False, ("composite", "input", "range"), ("aria-readonly", "aria-required"), ()),
    ("switch", False, ("checkbox",), (), ("aria-checked",)),
    ("tab", False, ("sectionhead", "widget"), ("aria-expanded", "aria-selected") + _POSITION, ()),
    ("tablist", False, ("composite",),
     ("aria-level", "aria-multiselectable", "aria-orientation"), ()),
    ("textbox", False, ("input",),
     ("aria-activedescendant", "aria-autocomplete", "aria-multiline", "aria-placeholder",
      "aria-readonly", "aria-required"), ()),
    ("toolbar", False, ("group",), ("aria-orientation",), ()),
    ("tree", False, ("select",), ("aria-multiselectable", "aria-required"), ()),
    ("treegrid", False, ("grid", "tree"), (), ()),
    ("treeitem", False, ("listitem", "option"), ("aria-expanded", "aria-selected"), ()),
)

# Roles whose preferred native element carries the same semantics.
PREFERRED_TAGS: Mapping[str, str] = MappingProxyType({
    "banner": "<header>",
    "button": "<button>",
    "complementary": "<aside>",
    "contentinfo": "<footer>",
    "form": "<form>",
    "heading": "<h1>-<h6>",
    "img": "<img>",
    "link": "<a>",
    "list": "<ul> or <ol>",
    "listitem": "<li>",
    "main": "<main>",
    "navigation": "<nav>",
    "progressbar": "<progress>",
    "region": "<section>",
    "row": "<tr>",
    "rowgroup": "<tbody>, <thead>, or <tfoot>",
    "rowheader": "<th>",
    "table": "<table>",
    "textbox": "<input> or <textarea>",
})


def _ancestors(name: str, rows: Dict[str, tuple]) -> FrozenSet[str]:
    seen = set()
    stack = list(rows[name][2])
    while stack:
        parent = stack.pop()
        if parent in seen:
            continue
        seen.add(parent)
        stack.extend(rows[parent][2])
    return frozenset(seen)


def build_role_table() -> Mapping[str, RoleDefinition]:
    """Resolves inheritance for every role and returns a read-only name -> definition map."""
    rows = {row[0]: row for row in _ROLE_ROWS}
    table = {}

    for name, abstract, superclasses, own, required in _ROLE_ROWS:
        lineage = _ancestors(name, rows)

        allowed = set(GLOBAL_ARIA_ATTRIBUTES) | set(own) | set(required)
        needed = set(required)
        for parent in lineage:
            allowed.update(rows[parent][3])
            allowed.update(rows[parent][4])
            needed.update(rows[parent][4])

        table[name] = RoleDefinition(
            name=name,
            abstract=abstract,
            interactive=name in INTERACTIVE_ROLES,
            required_props=frozenset(needed),
            allowed_props=frozenset(allowed),
            superclass_roles=frozenset(superclasses),
        )

    return MappingProxyType(table)
