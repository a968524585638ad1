# tests/auditor/test_scenarios.py
"""
End-to-end checks on small components with every rule enabled.
"""
from rsx_auditor.dom.qngine import QNGINE
from rsx_auditor.model import RuleId, Severity

LOGO_COMPONENT = """use yew::prelude::*;

#[derive(Properties, PartialEq)]
pub struct LogoProps {
    pub src: AttrValue,
}

#[function_component(Logo)]
pub fn logo(props: &LogoProps) -> Html {
    let src = props.src.clone();
    html! {
        <div class="logo">
            <img src={src} />
        </div>
    }
}
"""


def test_img_without_alt_reports_alt_text_at_element(parse):
    """An <img> without alt yields exactly one alt-text error at the element position."""
    diagnostics = QNGINE().run(parse(LOGO_COMPONENT), "src/logo.rs")

    assert len(diagnostics) == 1
    d = diagnostics[0]
    assert d.rule == RuleId.ALT_TEXT
    assert d.severity == Severity.ERROR
    assert (d.file, d.line, d.column) == ("src/logo.rs", 13, 13)
    assert d.element == "img"
    assert d.help


def test_redundant_button_role(lint):
    """role="button" on a <button> is only reported as redundant."""
    diagnostics = lint('<button role="button">{"Save"}</button>')

    assert [d.rule for d in diagnostics] == [RuleId.NO_REDUNDANT_ROLES]
    assert diagnostics[0].severity == Severity.WARNING
    # Reported at the role attribute, right after `<button `.
    assert (diagnostics[0].line, diagnostics[0].column) == (3, 17)


def test_clickable_div(rule_ids):
    """A <div> with only a click handler misses keyboard support and a role."""
    assert rule_ids('<div onclick={on_open}>{"Open"}</div>') == [
        "click-events-have-key-events",
        "no-static-element-interactions",
    ]


def test_dynamic_alt_is_trusted(lint):
    """An alt bound to an expression cannot be judged statically."""
    assert lint('<img src="/a.png" alt={description} />') == []


def test_placeholder_anchor_with_ambiguous_text(lint):
    """href="#" is invalid and "Learn more" is ambiguous."""
    diagnostics = lint('<a href="#">{"Learn more"}</a>')
    by_rule = {d.rule: d for d in diagnostics}

    assert set(by_rule) == {RuleId.ANCHOR_IS_VALID, RuleId.ANCHOR_AMBIGUOUS_TEXT}
    assert (by_rule[RuleId.ANCHOR_IS_VALID].line, by_rule[RuleId.ANCHOR_IS_VALID].column) == (3, 12)
    assert (by_rule[RuleId.ANCHOR_AMBIGUOUS_TEXT].line, by_rule[RuleId.ANCHOR_AMBIGUOUS_TEXT].column) == (3, 9)


def test_unknown_role_only_reports_aria_role(lint):
    """An unknown role is an aria-role error and nothing else."""
    diagnostics = lint('<div role="banana">{"Fruit"}</div>')

    assert [d.rule for d in diagnostics] == [RuleId.ARIA_ROLE]
    assert "banana" in diagnostics[0].message


def test_clean_component_has_no_findings(lint):
    """Well-formed markup produces no diagnostics."""
    markup = """
        <main>
            <h1>{"Settings"}</h1>
            <form>
                <label for="email">{"Email"}</label>
                <input id="email" type="email" autocomplete="email" />
                <button type="submit">{"Save"}</button>
            </form>
            <img src="/banner.png" alt="Mountains at sunrise" />
        </main>
    """
    assert lint(markup) == []


def test_components_are_not_linted(lint):
    """PascalCase components are content, not HTML elements."""
    assert lint('<Button onclick={save}><Img src="x.png" /></Button>') == []


def test_elements_inside_components_are_linted(rule_ids):
    """Children of a component are still checked."""
    assert rule_ids('<Card><img src="x.png" /></Card>') == ["alt-text"]
