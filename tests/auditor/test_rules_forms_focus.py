# tests/auditor/test_rules_forms_focus.py
import pytest

from rsx_auditor.model import Severity


@pytest.mark.parametrize("markup, expected", [
    ('<input autocomplete="email" />', 0),
    ('<input autocomplete="off" />', 0),
    ('<input autocomplete="shipping street-address" />', 0),
    ('<input autocomplete="section-blue billing postal-code" />', 0),
    ('<input autocomplete="work email" />', 0),
    ('<input autocomplete="username webauthn" />', 0),
    ('<input autocomplete="nonsense" />', 1),
    ('<input autocomplete="on off" />', 1),
    ('<input autocomplete="home name" />', 1),
    ('<textarea autocomplete="street-address"></textarea>', 0),
    ('<select autocomplete="country-nam"></select>', 1),
    ('<input autocomplete={ac} />', 0),
    ('<div autocomplete="nonsense"></div>', 0),
])
def test_autocomplete_valid(lint, markup, expected):
    """autocomplete values must follow the HTML token grammar."""
    assert len(lint(markup, only=["autocomplete-valid"])) == expected


def test_autocomplete_message_names_the_bad_token(lint):
    (d,) = lint('<input autocomplete="nonsense" />', only=["autocomplete-valid"])
    assert d.message == 'Invalid `autocomplete` value "nonsense" on <input>: "nonsense" is not a known field name.'


@pytest.mark.parametrize("markup, expected", [
    ('<input type="text" />', 1),
    ('<input />', 1),
    ('<input type="text" aria-label="Search" />', 0),
    ('<input type="text" aria-labelledby="search-label" />', 0),
    ('<input type="text" title="Search" />', 0),
    ('<input type="text" id="email" />', 0),
    ('<label>{"Name "}<input type="text" /></label>', 0),
    ('<input type="submit" />', 0),
    ('<input type="button" />', 1),
    ('<input type="button" value="Go" />', 0),
    ('<input type="hidden" name="csrf" />', 0),
    ('<input type={kind} />', 0),
    ('<button></button>', 1),
    ('<button>{"Save"}</button>', 0),
    ('<button><img src="save.png" alt="Save" /></button>', 0),
    ('<select></select>', 1),
    ('<textarea aria-label="Comment"></textarea>', 0),
    ('<progress value="3" max="10"></progress>', 1),
])
def test_control_has_associated_label(lint, markup, expected):
    """Form controls need an accessible label."""
    assert len(lint(markup, only=["control-has-associated-label"])) == expected


@pytest.mark.parametrize("markup, expected", [
    ('<label>{"Name"}</label>', 1),
    ('<label for="name">{"Name"}</label>', 0),
    ('<label html_for="name">{"Name"}</label>', 0),
    ('<label><input type="checkbox" />{" Remember me"}</label>', 0),
    ('<label>{"Country"}<CountryPicker /></label>', 0),
    ('<label for="name"></label>', 1),
    ('<label for="name" aria-label="Name"></label>', 0),
    ('<label for="name">{label_text}</label>', 0),
])
def test_label_has_associated_control(lint, markup, expected):
    """Labels need text and a control."""
    assert len(lint(markup, only=["label-has-associated-control"])) == expected


def test_empty_label_message(lint):
    (d,) = lint('<label for="name"></label>', only=["label-has-associated-control"])
    assert d.message == "<label> element has no text content."


@pytest.mark.parametrize("markup, expected", [
    ('<button accesskey="s">{"Save"}</button>', 1),
    ('<button accesskey="">{"Save"}</button>', 0),
    ('<button>{"Save"}</button>', 0),
])
def test_no_access_key(lint, markup, expected):
    assert len(lint(markup, only=["no-access-key"])) == expected


@pytest.mark.parametrize("markup, expected", [
    ('<input autofocus=true />', 1),
    ('<input autofocus />', 1),
    ('<input autofocus="false" />', 0),
    ('<input autofocus={focus} />', 0),
    ('<input />', 0),
])
def test_no_autofocus(lint, markup, expected):
    assert len(lint(markup, only=["no-autofocus"])) == expected


@pytest.mark.parametrize("markup, expected", [
    ('<div tabindex="3"></div>', 1),
    ('<div tabindex="+2"></div>', 1),
    ('<div tabindex="0"></div>', 0),
    ('<div tabindex="-1"></div>', 0),
    ('<div tabindex={index}></div>', 0),
    ('<div tabindex="soon"></div>', 0),
])
def test_tabindex_no_positive(lint, markup, expected):
    assert len(lint(markup, only=["tabindex-no-positive"])) == expected


def test_tabindex_no_positive_message(lint):
    (d,) = lint('<div tabindex="3"></div>', only=["tabindex-no-positive"])
    assert d.message == "Avoid using positive `tabindex` value (3) on <div>. This creates an unexpected tab order."


@pytest.mark.parametrize("markup, expected", [
    ('<div tabindex="0"></div>', 1),
    ('<div tabindex="-1"></div>', 0),
    ('<div tabindex={index}></div>', 1),
    ('<div role="button" tabindex="0"></div>', 0),
    ('<div role="tabpanel" tabindex="0"></div>', 0),
    ('<div role={role} tabindex="0"></div>', 0),
    ('<div role="banana" tabindex="0"></div>', 0),
    ('<button tabindex="0">{"Save"}</button>', 0),
    ('<article tabindex="0"></article>', 1),
    ('<div aria-activedescendant="opt-1" tabindex="0"></div>', 0),
])
def test_no_noninteractive_tabindex(lint, markup, expected):
    """Only interactive elements belong in the tab order."""
    assert len(lint(markup, only=["no-noninteractive-tabindex"])) == expected


def test_no_noninteractive_tabindex_fires_on_presence(lint):
    """A runtime tabindex value still puts a non-interactive element in the tab order."""
    (d,) = lint('<div tabindex={index}>{"x"}</div>', only=["no-noninteractive-tabindex"])
    assert (d.line, d.column) == (3, 14)
    assert d.message.startswith("Non-interactive element <div> should not have `tabindex`.")


@pytest.mark.parametrize("markup, expected", [
    ('<button aria-hidden="true">{"Close"}</button>', 1),
    ('<a href="/" aria-hidden="true">{"Home"}</a>', 1),
    ('<div aria-hidden="true" tabindex="0"></div>', 1),
    ('<div aria-hidden="true"></div>', 0),
    ('<button aria-hidden="true" tabindex="-1">{"Close"}</button>', 0),
    ('<button aria-hidden="true" disabled=true>{"Close"}</button>', 0),
    ('<button aria-hidden="false">{"Close"}</button>', 0),
    ('<button aria-hidden={hidden}>{"Close"}</button>', 0),
    ('<button aria-hidden="true" tabindex={index}>{"Close"}</button>', 0),
])
def test_no_aria_hidden_on_focusable(lint, markup, expected):
    """Focusable elements must stay visible to assistive technology."""
    assert len(lint(markup, only=["no-aria-hidden-on-focusable"])) == expected


def test_no_aria_hidden_on_focusable_is_an_error_at_the_attribute(lint):
    (d,) = lint('<button aria-hidden="true">{"Close"}</button>', only=["no-aria-hidden-on-focusable"])
    assert d.severity == Severity.ERROR
    assert (d.line, d.column) == (3, 17)
