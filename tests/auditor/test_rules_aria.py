# tests/auditor/test_rules_aria.py
import pytest

from rsx_auditor.model import Severity


@pytest.mark.parametrize("markup, expected", [
    ('<div aria-lable="Menu"></div>', 1),
    ('<div aria-label="Menu"></div>', 0),
    ('<div aria-labeledby="title"></div>', 1),
    ('<div aria-foo="bar" aria-bar="baz"></div>', 2),
    ('<div data-aria="x"></div>', 0),
])
def test_aria_props(lint, markup, expected):
    """Every aria-* attribute must be a defined ARIA state or property."""
    assert len(lint(markup, only=["aria-props"])) == expected


def test_aria_props_suggests_the_closest_name(lint):
    (d,) = lint('<div aria-lable="Menu"></div>', only=["aria-props"])
    assert "Did you mean `aria-label`?" in d.message
    assert d.severity == Severity.ERROR


@pytest.mark.parametrize("markup, expected", [
    ('<div aria-hidden="yes"></div>', 1),
    ('<div aria-hidden="true"></div>', 0),
    ('<div aria-hidden={hidden}></div>', 0),
    ('<div aria-hidden></div>', 0),
    ('<div aria-expanded=""></div>', 0),
    ('<div role="checkbox" aria-checked=""></div>', 1),
    ('<div role="checkbox" aria-checked="mixed"></div>', 0),
    ('<div role="checkbox" aria-checked="maybe"></div>', 1),
    ('<div role="slider" aria-valuenow="ten"></div>', 1),
    ('<div role="slider" aria-valuenow="10.5"></div>', 0),
    ('<h2 aria-level="two"></h2>', 1),
    ('<div aria-live="polite"></div>', 0),
    ('<div aria-live="loud"></div>', 1),
    ('<div aria-relevant="additions text"></div>', 0),
    ('<div aria-relevant="additions everything"></div>', 1),
    ('<div aria-label="Anything goes"></div>', 0),
])
def test_aria_proptypes(lint, markup, expected):
    """ARIA values must fit the attribute's value domain."""
    assert len(lint(markup, only=["aria-proptypes"])) == expected


def test_aria_proptypes_explains_the_expected_values(lint):
    (d,) = lint('<div aria-hidden="yes"></div>', only=["aria-proptypes"])
    assert d.message == (
        'Invalid value "yes" for `aria-hidden` on <div>. Expected one of: "true", "false", "undefined".'
    )


@pytest.mark.parametrize("markup, expected", [
    ('<div role="banana"></div>', 1),
    ('<div role="widget"></div>', 1),
    ('<div role="button"></div>', 0),
    ('<div role="switch checkbox"></div>', 0),
    ('<div role="presentation foo"></div>', 1),
    ('<div role={role}></div>', 0),
])
def test_aria_role(lint, markup, expected):
    """Roles must be known and concrete."""
    assert len(lint(markup, only=["aria-role"])) == expected


def test_abstract_role_message(lint):
    (d,) = lint('<div role="widget"></div>', only=["aria-role"])
    assert d.message.startswith('Abstract ARIA role "widget"')


@pytest.mark.parametrize("markup, expected", [
    ('<meta charset="utf-8" aria-hidden="true" />', 1),
    ('<script role="presentation" aria-label="x"></script>', 2),
    ('<title>{"Home"}</title>', 0),
    ('<div role="presentation" aria-hidden="true"></div>', 0),
])
def test_aria_unsupported_elements(lint, markup, expected):
    """Elements outside the accessibility tree take no role or aria-* attributes."""
    assert len(lint(markup, only=["aria-unsupported-elements"])) == expected


@pytest.mark.parametrize("markup, expected", [
    ('<div aria-activedescendant="opt-1"></div>', 1),
    ('<div aria-activedescendant="opt-1" tabindex="0"></div>', 0),
    ('<div aria-activedescendant="opt-1" tabindex={tab}></div>', 0),
    ('<input aria-activedescendant="opt-1" />', 0),
    ('<div></div>', 0),
])
def test_aria_activedescendant_has_tabindex(lint, markup, expected):
    """aria-activedescendant only works on a focusable element."""
    assert len(lint(markup, only=["aria-activedescendant-has-tabindex"])) == expected


@pytest.mark.parametrize("markup, expected", [
    ('<nav role="navigation"></nav>', 1),
    ('<ul role="list"></ul>', 1),
    ('<input type="checkbox" role="checkbox" />', 1),
    ('<a href="/" role="link">{"Home"}</a>', 1),
    ('<a role="link">{"Home"}</a>', 0),
    ('<nav role="menubar"></nav>', 0),
    ('<div role="button"></div>', 0),
])
def test_no_redundant_roles(lint, markup, expected):
    """An explicit role equal to the implicit one is noise."""
    assert len(lint(markup, only=["no-redundant-roles"])) == expected


@pytest.mark.parametrize("markup, expected", [
    ('<div role="checkbox"></div>', 1),
    ('<div role="checkbox" aria-checked="false"></div>', 0),
    ('<div role="checkbox" aria-checked={checked}></div>', 0),
    ('<input type="checkbox" role="checkbox" />', 0),
    ('<div role="slider" aria-valuenow="4"></div>', 0),
    ('<div role="heading"></div>', 1),
    ('<h2 role="heading"></h2>', 0),
    ('<div role="button"></div>', 0),
])
def test_role_has_required_aria_props(lint, markup, expected):
    """Roles must come with the properties they require."""
    assert len(lint(markup, only=["role-has-required-aria-props"])) == expected


def test_required_props_are_listed_in_order(lint):
    (d,) = lint('<div role="combobox"></div>', only=["role-has-required-aria-props"])
    assert d.message == (
        '<div> with role="combobox" is missing required ARIA properties: `aria-controls`, `aria-expanded`.'
    )


@pytest.mark.parametrize("markup, expected", [
    ('<button aria-checked="true">{"Bold"}</button>', 1),
    ('<button aria-pressed="true">{"Bold"}</button>', 0),
    ('<div aria-checked="true"></div>', 1),
    ('<div aria-label="Toolbar"></div>', 0),
    ('<div role="checkbox" aria-checked="true"></div>', 0),
    ('<input type="checkbox" aria-checked="true" />', 0),
    ('<input type={kind} aria-pressed="true" />', 0),
    ('<div role={role} aria-pressed="true"></div>', 0),
    ('<div role="banana" aria-pressed="true"></div>', 0),
    ('<div aria-foo="x"></div>', 0),
])
def test_role_supports_aria_props(lint, markup, expected):
    """Only properties the role supports may be used."""
    assert len(lint(markup, only=["role-supports-aria-props"])) == expected


def test_role_supports_aria_props_without_role(lint):
    (d,) = lint('<div aria-checked="true"></div>', only=["role-supports-aria-props"])
    assert "which has no role" in d.message


@pytest.mark.parametrize("markup, expected", [
    ('<div role="button"></div>', 1),
    ('<span role="link"></span>', 1),
    ('<span role="checkbox" aria-checked="false"></span>', 0),
    ('<header role="banner"></header>', 0),
    ('<div role={role}></div>', 0),
])
def test_prefer_tag_over_role(lint, markup, expected):
    """Native elements beat ARIA roles."""
    assert len(lint(markup, only=["prefer-tag-over-role"])) == expected


def test_prefer_tag_over_role_is_informational(lint):
    (d,) = lint('<div role="button"></div>', only=["prefer-tag-over-role"])
    assert d.severity == Severity.INFO
    assert "<button>" in d.message


@pytest.mark.parametrize("markup, expected", [
    ('<button role="heading">{"Title"}</button>', 1),
    ('<a href="/" role="img">{"Home"}</a>', 1),
    ('<a href="/" role="button">{"Home"}</a>', 0),
    ('<a role="img">{"Home"}</a>', 0),
    ('<div role="heading"></div>', 0),
])
def test_no_interactive_element_to_noninteractive_role(lint, markup, expected):
    assert len(lint(markup, only=["no-interactive-element-to-noninteractive-role"])) == expected


@pytest.mark.parametrize("markup, expected", [
    ('<h3 role="button">{"Toggle"}</h3>', 1),
    ('<article role="link"></article>', 1),
    ('<li role="menuitem">{"Open"}</li>', 0),
    ('<ul role="listbox"></ul>', 0),
    ('<td role="gridcell"></td>', 0),
    ('<div role="button"></div>', 0),
    ('<h3 role="heading"></h3>', 0),
])
def test_no_noninteractive_element_to_interactive_role(lint, markup, expected):
    assert len(lint(markup, only=["no-noninteractive-element-to-interactive-role"])) == expected
