# src/rsx_auditor/aria/tokens.py
"""
Grammars for token-valued HTML attributes: `autocomplete` and BCP 47 `lang`.

Language tags are validated structurally only. A well-formed tag that is not in
the IANA subtag registry (e.g. "qq-ZZ") is accepted.
"""
import re
from typing import Optional

AUTOCOMPLETE_FIELDS = frozenset({
    "on", "off",
    "name", "honorific-prefix", "given-name", "additional-name", "family-name",
    "honorific-suffix", "nickname",
    "email", "username", "new-password", "current-password", "one-time-code",
    "organization-title", "organization",
    "street-address", "address-line1", "address-line2", "address-line3",
    "address-level4", "address-level3", "address-level2", "address-level1",
    "country", "country-name", "postal-code",
    "cc-name", "cc-given-name", "cc-additional-name", "cc-family-name", "cc-number",
    "cc-exp", "cc-exp-month", "cc-exp-year", "cc-csc", "cc-type",
    "transaction-currency", "transaction-amount",
    "language", "bday", "bday-day", "bday-month", "bday-year", "sex",
    "tel", "tel-country-code", "tel-national", "tel-area-code", "tel-local", "tel-extension",
    "impp", "url", "photo", "webauthn",
})

AUTOCOMPLETE_ADDRESS_MODES = frozenset({"shipping", "billing"})

# Contact-type qualifiers only combine with these fields.
AUTOCOMPLETE_CONTACT_MODES = frozenset({"home", "work", "mobile", "fax", "pager"})
AUTOCOMPLETE_CONTACT_FIELDS = frozenset({
    "tel", "tel-country-code", "tel-national", "tel-area-code", "tel-local", "tel-extension",
    "email", "impp",
})


def autocomplete_error(value: str) -> Optional[str]:
    """
    Checks an autocomplete value against the token grammar:
    [section-*] [shipping|billing] [home|work|mobile|fax|pager] field [webauthn].
    Returns a reason when invalid, None when the value is well formed.
    """
    tokens = value.lower().split()
    if not tokens:
        return "value is empty"

    if tokens[0] in ("on", "off"):
        if len(tokens) > 1:
            return f"\"{tokens[0]}\" cannot be combined with other tokens"
        return None

    i = 0
    if tokens[i].startswith("section-"):
        if len(tokens[i]) == len("section-"):
            return "\"section-\" needs a name"
        i += 1
    if i < len(tokens) and tokens[i] in AUTOCOMPLETE_ADDRESS_MODES:
        i += 1
    contact = None
    if i < len(tokens) and tokens[i] in AUTOCOMPLETE_CONTACT_MODES:
        contact = tokens[i]
        i += 1

    if i >= len(tokens):
        return "missing a field name"
    field = tokens[i]
    if field not in AUTOCOMPLETE_FIELDS or field in ("on", "off"):
        return f"\"{field}\" is not a known field name"
    if contact and field not in AUTOCOMPLETE_CONTACT_FIELDS:
        return f"\"{contact}\" cannot qualify \"{field}\""
    i += 1

    if i < len(tokens) and tokens[i] == "webauthn" and field != "webauthn":
        i += 1
    if i < len(tokens):
        return f"unexpected token \"{tokens[i]}\""
    return None


_LANGUAGE_TAG = re.compile(
    r"""
    ^(?:
        (?P<language>[a-z]{2,3})
        (?:-[a-z]{3}){0,3}                     # extlang
        (?:-[a-z]{4})?                         # script
        (?:-(?:[a-z]{2}|[0-9]{3}))?            # region
        (?:-(?:[a-z0-9]{5,8}|[0-9][a-z0-9]{3}))*   # variant
        (?:-[0-9a-wy-z](?:-[a-z0-9]{2,8})+)*   # extension
        (?:-x(?:-[a-z0-9]{1,8})+)?             # private use
    |
        x(?:-[a-z0-9]{1,8})+                   # private use only
    )$
    """,
    re.VERBOSE,
)


def validate_language_tag(value: str) -> bool:
    """Structural BCP 47 check, e.g. "en", "en-US", "zh-Hans-CN", "de-CH-1901"."""
    if not value or value != value.strip():
        return False
    return bool(_LANGUAGE_TAG.match(value.lower()))
