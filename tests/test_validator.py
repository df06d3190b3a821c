import pytest

from html_attribute_schema.config import ExtraLinkType, ValidatorConfig
from html_attribute_schema.exceptions import ConfigurationError
from html_attribute_schema.linter.report import DiagnosticCode, Severity
from html_attribute_schema.linter.validator import Validator, normalize_presence
from html_attribute_schema.models.constraints import Boolean, FreeString, Number
from html_attribute_schema.models.schema_loader import load_schema_table


def _codes(diagnostics):
    return [d.code for d in diagnostics]


@pytest.mark.parametrize("tag, attributes", [
    ("a", {"href": "https://example.com/", "rel": "noopener noreferrer", "target": "_blank", "download": ""}),
    ("a", {"href": "#top", "hreflang": "en", "referrerpolicy": "no-referrer", "ping": "/p /q"}),
    ("area", {"shape": "rect", "coords": "0,0,10,10", "href": "/map", "alt": "Map"}),
    ("area", {"shape": "circle", "coords": "5,5,5", "href": "/c", "alt": "", "rel": "bookmark tag"}),
    ("link", {"rel": "stylesheet", "href": "/site.css", "media": "screen"}),
    ("link", {"rel": "icon", "href": "/favicon.ico", "sizes": "16x16", "crossorigin": ""}),
    ("form", {"action": "/search", "method": "get", "rel": "search nofollow", "novalidate": None}),
    ("input", {"type": "checkbox", "checked": None, "name": "agree", "required": ""}),
    ("img", {"src": "/a.png", "alt": "A", "width": "120", "height": 80, "loading": "lazy"}),
    ("div", {}),
    ("abbr", {"title": "HyperText Markup Language", "dir": "ltr", "lang": "en", "tabindex": "-1"}),
])
def test_examples_validate_clean(validator, tag, attributes):
    diagnostics = validator.validate(tag, attributes)
    assert [d for d in diagnostics if d.code != DiagnosticCode.UNKNOWN_ELEMENT] == []


def test_enum_is_case_sensitive(validator):
    diagnostics = validator.validate("area", {"shape": "Rect"})
    assert _codes(diagnostics) == [DiagnosticCode.INVALID_VALUE]
    assert diagnostics[0].allowed_values == ("circle", "default", "poly", "rect")
    assert validator.validate("area", {"shape": "rect"}) == []


@pytest.mark.parametrize("value", [True, False, "true", "false"])
def test_booleanish_accepts_exact_domain(validator, value):
    assert validator.validate("a", {"draggable": value, "spellcheck": value}) == []


@pytest.mark.parametrize("value", ["1", "yes", ""])
def test_booleanish_rejects_other_strings(validator, value):
    diagnostics = validator.validate("a", {"draggable": value})
    assert _codes(diagnostics) == [DiagnosticCode.INVALID_VALUE]
    assert diagnostics[0].allowed_values == ("false", "true")


def test_rel_host_mismatch_is_reported_once_per_token(validator):
    diagnostics = validator.validate("link", {"rel": "stylesheet nofollow"})
    assert _codes(diagnostics) == [DiagnosticCode.REL_TYPE_HOST_MISMATCH]
    mismatch = diagnostics[0]
    assert mismatch.token == "nofollow"
    assert mismatch.attribute == "rel"
    assert mismatch.allowed_values == ("a", "area", "form")
    assert "nofollow" in mismatch.message


@pytest.mark.parametrize("tag", ["a", "area", "form", "link"])
def test_unrecognized_rel_token_yields_one_diagnostic(validator, tag):
    attributes = {"rel": "bogus-token", "id": "main", "class": "nav"}
    diagnostics = validator.validate(tag, attributes)
    assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_LINK_TYPE]
    assert diagnostics[0].token == "bogus-token"
    assert diagnostics[0].severity == Severity.WARNING


def test_rel_reports_every_offending_token(validator):
    diagnostics = validator.validate("a", {"rel": "stylesheet nofollow bogus canonical"})
    assert [(d.code, d.token) for d in diagnostics] == [
        (DiagnosticCode.REL_TYPE_HOST_MISMATCH, "stylesheet"),
        (DiagnosticCode.UNKNOWN_LINK_TYPE, "bogus"),
        (DiagnosticCode.REL_TYPE_HOST_MISMATCH, "canonical"),
    ]


def test_rel_case_policy_both_cases(make_validator):
    strict = make_validator()
    relaxed = make_validator(rel_case_sensitive=False)
    attributes = {"rel": "StyleSheet"}
    assert _codes(strict.validate("link", attributes)) == [DiagnosticCode.UNKNOWN_LINK_TYPE]
    assert relaxed.validate("link", attributes) == []
    assert strict.validate("link", {"rel": "stylesheet"}) == []
    assert relaxed.validate("link", {"rel": "stylesheet"}) == []


def test_relaxed_case_still_checks_hosts(make_validator):
    relaxed = make_validator(rel_case_sensitive=False)
    diagnostics = relaxed.validate("link", {"rel": "NoFollow"})
    assert _codes(diagnostics) == [DiagnosticCode.REL_TYPE_HOST_MISMATCH]


def test_deprecated_link_type_is_reported_independently(validator):
    diagnostics = validator.validate("a", {"rel": "archives", "href": "/2020/"})
    assert _codes(diagnostics) == [DiagnosticCode.DEPRECATED_ATTRIBUTE]
    assert diagnostics[0].token == "archives"
    assert diagnostics[0].severity == Severity.INFO


def test_experimental_link_type_is_reported(validator):
    diagnostics = validator.validate("link", {"rel": "preconnect dns-prefetch", "href": "https://cdn"})
    assert [(d.code, d.token) for d in diagnostics] == [
        (DiagnosticCode.EXPERIMENTAL_ATTRIBUTE, "preconnect"),
        (DiagnosticCode.EXPERIMENTAL_ATTRIBUTE, "dns-prefetch"),
    ]


def test_deprecated_token_on_wrong_host_gets_both_diagnostics(validator):
    diagnostics = validator.validate("form", {"rel": "archives"})
    assert _codes(diagnostics) == [
        DiagnosticCode.REL_TYPE_HOST_MISMATCH,
        DiagnosticCode.DEPRECATED_ATTRIBUTE,
    ]


def test_deprecation_and_validity_are_independent(validator):
    assert _codes(validator.validate("area", {"nohref": None})) == [DiagnosticCode.DEPRECATED_ATTRIBUTE]
    assert _codes(validator.validate("area", {"nohref": "yes"})) == [
        DiagnosticCode.INVALID_VALUE,
        DiagnosticCode.DEPRECATED_ATTRIBUTE,
    ]
    assert _codes(validator.validate("area", {"type": "text/html"})) == [DiagnosticCode.DEPRECATED_ATTRIBUTE]
    assert validator.validate("a", {"type": "text/html"}) == []


def test_deprecated_global_attribute(validator):
    assert _codes(validator.validate("abbr", {"contextmenu": "menu1"})) == [DiagnosticCode.DEPRECATED_ATTRIBUTE]


def test_experimental_attribute(validator):
    assert _codes(validator.validate("a", {"part": "label"})) == [DiagnosticCode.EXPERIMENTAL_ATTRIBUTE]
    assert _codes(validator.validate("a", {"unselectable": "maybe"})) == [
        DiagnosticCode.INVALID_VALUE,
        DiagnosticCode.EXPERIMENTAL_ATTRIBUTE,
    ]


def test_deprecated_element(validator):
    diagnostics = validator.validate("acronym", {"title": "NASA"})
    assert _codes(diagnostics) == [DiagnosticCode.DEPRECATED_ELEMENT]
    assert diagnostics[0].attribute == ""


def test_unknown_element_keeps_global_attributes(validator):
    diagnostics = validator.validate("foo-bar", {"id": "x"})
    assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_ELEMENT]
    assert diagnostics[0].tag == "foo-bar"
    assert diagnostics[0].severity == Severity.INFO


def test_unknown_element_rejects_non_global_attributes(validator):
    diagnostics = validator.validate("foo-bar", {"href": "/x"})
    assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_ELEMENT, DiagnosticCode.UNKNOWN_ATTRIBUTE]


def test_unknown_element_report_can_be_disabled(make_validator):
    assert make_validator(report_unknown_elements=False).validate("foo-bar", {"id": "x"}) == []


@pytest.mark.parametrize("tag", ["a", "link", "foo-bar", "br"])
def test_passthrough_attributes_are_never_unknown(validator, tag):
    diagnostics = validator.validate(tag, {"data-custom": "anything", "aria-label": "Close", "data-flag": None})
    assert DiagnosticCode.UNKNOWN_ATTRIBUTE not in _codes(diagnostics)


def test_bare_prefix_is_not_passthrough(validator):
    assert _codes(validator.validate("a", {"data-": "x"})) == [DiagnosticCode.UNKNOWN_ATTRIBUTE]


def test_custom_passthrough_prefixes(make_validator):
    custom = make_validator(passthrough_prefixes=("x-",))
    assert custom.validate("a", {"x-foo": "1"}) == []
    assert _codes(custom.validate("a", {"data-foo": "1"})) == [DiagnosticCode.UNKNOWN_ATTRIBUTE]


def test_unknown_attribute(validator):
    diagnostics = validator.validate("a", {"shape": "rect"})
    assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_ATTRIBUTE]
    assert diagnostics[0].attribute == "shape"
    assert diagnostics[0].tag == "a"


def test_attribute_names_and_tags_are_case_insensitive(validator):
    assert validator.validate("A", {"HREF": "/x", "TabIndex": "0"}) == []


def test_boolean_presence_normalization(validator):
    assert validator.validate("abbr", {"hidden": None}) == []
    assert validator.validate("abbr", {"hidden": ""}) == []
    assert validator.validate("abbr", {"hidden": True}) == []
    assert _codes(validator.validate("abbr", {"hidden": "hidden"})) == [DiagnosticCode.INVALID_VALUE]


def test_presence_only_non_boolean_is_empty_string(validator):
    assert validator.validate("a", {"download": None}) == []
    assert _codes(validator.validate("abbr", {"dir": None})) == [DiagnosticCode.INVALID_VALUE]


def test_normalize_presence():
    assert normalize_presence(Boolean(), None) is True
    assert normalize_presence(Boolean(), "") is True
    assert normalize_presence(Boolean(), "x") == "x"
    assert normalize_presence(FreeString(), None) == ""
    assert normalize_presence(Number(), "") == ""


def test_number_attribute(validator):
    assert validator.validate("abbr", {"tabindex": 3}) == []
    assert _codes(validator.validate("abbr", {"tabindex": "first"})) == [DiagnosticCode.INVALID_VALUE]


def test_contenteditable_union(validator):
    assert validator.validate("abbr", {"contenteditable": "inherit"}) == []
    assert validator.validate("abbr", {"contenteditable": "true"}) == []
    diagnostics = validator.validate("abbr", {"contenteditable": "plaintext-only"})
    assert diagnostics[0].allowed_values == ("false", "inherit", "true")


def test_diagnostics_follow_attribute_order(validator):
    diagnostics = validator.validate("a", {"zzz": "1", "dir": "up", "aaa": "2"})
    assert [d.attribute for d in diagnostics] == ["zzz", "dir", "aaa"]


def test_validate_is_idempotent(validator):
    attributes = {"rel": "stylesheet nofollow archives bogus", "shape": "x", "dir": "Up", "data-a": "1"}
    first = validator.validate("a", attributes)
    second = validator.validate("a", attributes)
    assert first == second
    assert repr(first) == repr(second)


def test_validate_accepts_pairs_and_bare_names(validator):
    diagnostics = validator.validate("input", [("type", "text"), "disabled", ("value", "x")])
    assert diagnostics == []


@pytest.mark.parametrize("tag, attributes", [
    (None, None),
    (42, {"id": 5}),
    ("a", 42),
    ("a", {"href": ["x"], "rel": {"a": 1}, "tabindex": object()}),
    ("", {"": ""}),
    ("link", "rel"),
])
def test_validate_never_raises(validator, tag, attributes):
    diagnostics = validator.validate(tag, attributes)
    assert isinstance(diagnostics, list)


def test_non_string_value_for_free_string(validator):
    diagnostics = validator.validate("foo-bar", {"id": 5})
    assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_ELEMENT, DiagnosticCode.INVALID_VALUE]


def test_disabled_codes_are_dropped(make_validator):
    quiet = make_validator(disabled_codes=("UnknownElement", "ExperimentalAttribute"))
    assert quiet.validate("foo-bar", {"part": "x"}) == []


def test_unknown_disabled_code_is_rejected(table):
    with pytest.raises(ConfigurationError):
        Validator(table, config=ValidatorConfig(disabled_codes=("NotACode",)))


def test_vendor_link_types_from_config():
    config = ValidatorConfig(extra_link_types=(ExtraLinkType(token="me", hosts=("a", "link"), experimental=True),))
    validator = Validator(load_schema_table(config=config), config=config)
    diagnostics = validator.validate("a", {"rel": "me"})
    assert [(d.code, d.token) for d in diagnostics] == [(DiagnosticCode.EXPERIMENTAL_ATTRIBUTE, "me")]
    assert _codes(validator.validate("form", {"rel": "me"})) == [
        DiagnosticCode.REL_TYPE_HOST_MISMATCH,
        DiagnosticCode.EXPERIMENTAL_ATTRIBUTE,
    ]


def test_diagnostic_to_dict(validator):
    data = validator.validate("area", {"shape": "Rect"})[0].to_dict()
    assert data["code"] == "InvalidValue"
    assert data["severity"] == "warning"
    assert data["allowed_values"] == ["circle", "default", "poly", "rect"]
    assert "token" not in data
