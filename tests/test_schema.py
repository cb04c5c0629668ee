"""Schema interpreter: binding, coercion and field rules."""

from datetime import date, datetime

import pytest

from tiketflow.models.form import FieldSchema, FieldType, parse_schema
from tiketflow.schema import KINDS, BoundSlot, FieldError, field_path, interpret, read_path, write_path


def make(name="f", type="text", **kw):
    return FieldSchema(name=name, label=kw.pop("label", name.title()), type=type, **kw)


# --- models ------------------------------------------------------------------

def test_field_schema_is_immutable():
    field = make()
    with pytest.raises(Exception):
        field.label = "other"


def test_field_schema_rejects_empty_name():
    with pytest.raises(Exception):
        FieldSchema(name="", label="x")


def test_unknown_type_falls_back_to_text():
    assert FieldSchema(name="x", type="rating").type == FieldType.TEXT


def test_comma_separated_options_are_split():
    field = FieldSchema(name="x", type="select", options="Ringan, Sedang ,Berat,")
    assert field.options == ["Ringan", "Sedang", "Berat"]


def test_parse_schema_skips_invalid_entries():
    fields = parse_schema([
        {"name": "alasan", "label": "Alasan", "type": "textarea", "required": True},
        {"label": "no name"},
        "garbage",
        {"name": "jumlah", "label": "Jumlah", "type": "number"},
    ])
    assert [f.name for f in fields] == ["alasan", "jumlah"]


@pytest.mark.parametrize("raw", [None, [], {}, "not a list"])
def test_parse_schema_empty_inputs(raw):
    assert parse_schema(raw) == []


def test_every_type_has_a_kind():
    assert set(KINDS) == set(FieldType)


# --- binding -----------------------------------------------------------------

def test_empty_schema_binds_nothing():
    assert interpret([], "ticket_data") == []
    assert interpret(None) == []


def test_slots_follow_schema_order_and_prefix():
    slots = interpret([make("b"), make("a")], "ticket_data")
    assert [s.key for s in slots] == ["ticket_data.b", "ticket_data.a"]


def test_empty_prefix_binds_at_root():
    slot = interpret([make("reason")], "")[0]
    payload: dict = {}
    slot.write(payload, "x")
    assert payload == {"reason": "x"}
    assert slot.key == "reason"


def test_dotted_prefix_nests_deeper():
    payload: dict = {}
    BoundSlot(make("n", "number"), "a.b").write(payload, "3")
    assert payload == {"a": {"b": {"n": 3}}}


def test_duplicate_names_keep_first():
    slots = interpret([make("x", label="First"), make("x", label="Second")])
    assert len(slots) == 1
    assert slots[0].field.label == "First"


def test_path_helpers():
    assert field_path("", "x") == ("x",)
    assert field_path("action_data", "x") == ("action_data", "x")
    payload = {"a": "not a dict"}
    assert read_path(payload, ("a", "b")) is None
    write_path(payload, ("a", "b"), 1)
    assert payload == {"a": {"b": 1}}


# --- coercion ----------------------------------------------------------------

def coerce(type, raw, **kw):
    field = make(type=type, **kw)
    return KINDS[field.type].coerce(field, raw)


@pytest.mark.parametrize("raw,expected", [
    ("42", 42),
    ("4.5", 4.5),
    (" 7 ", 7),
    (3, 3),
    (2.0, 2),
    ("", None),
    (None, None),
    ("abc", None),
    ("nan", None),
    ("inf", None),
    (True, None),
])
def test_number_coercion(raw, expected):
    result = coerce("number", raw)
    assert result == expected
    assert type(result) is type(expected)


def test_number_empty_is_unset_not_zero():
    assert coerce("number", "") is None


@pytest.mark.parametrize("raw,expected", [
    (True, True),
    (False, False),
    (None, None),
    ("true", True),
    ("Ya", True),
    ("0", False),
    ("tidak", False),
    (1, True),
    ("maybe", None),
])
def test_boolean_coercion(raw, expected):
    assert coerce("boolean", raw) is expected


@pytest.mark.parametrize("raw,expected", [
    (date(2026, 10, 18), "2026-10-18"),
    (datetime(2026, 10, 18, 9, 30), "2026-10-18"),
    ("2026-10-18", "2026-10-18"),
    ("2026-10-18T09:30:00Z", "2026-10-18"),
    ("", None),
    ("18/10/2026", None),
])
def test_date_coercion(raw, expected):
    assert coerce("date", raw) == expected


def test_select_keeps_only_listed_options():
    assert coerce("select", "A", options=["A", "B"]) == "A"
    assert coerce("select", "C", options=["A", "B"]) is None
    assert coerce("select", "", options=["A", "B"]) is None


def test_text_is_not_trimmed():
    assert coerce("text", "  spaced  ") == "  spaced  "
    assert coerce("textarea", "line 1\nline 2\n") == "line 1\nline 2\n"
    assert coerce("text", 12) == "12"


# --- display -----------------------------------------------------------------

def test_display_values():
    payload = {"d": {"flag": True, "when": "2026-10-18", "n": None}}
    flag = BoundSlot(make("flag", "boolean"), "d")
    when = BoundSlot(make("when", "date"), "d")
    n = BoundSlot(make("n", "number"), "d")
    missing = BoundSlot(make("missing", "boolean"), "d")
    assert flag.display(payload) == "Ya / Setuju"
    assert missing.display(payload) == "Tidak"
    assert when.display(payload) == "18 October 2026"
    assert n.display(payload) == ""
    # display never changes what is stored
    assert payload["d"]["when"] == "2026-10-18"


def test_placeholders_and_widgets():
    assert BoundSlot(make("t", "text", label="Judul")).placeholder == "Judul"
    assert BoundSlot(make("t", "text", placeholder="Ketik")).placeholder == "Ketik"
    assert BoundSlot(make("t", "textarea")).placeholder == "Isi detail..."
    assert BoundSlot(make("t", "number")).placeholder == "0"
    assert BoundSlot(make("t", "select", options=["A"])).widget == "select"
    assert BoundSlot(make("t", "boolean")).widget == "switch"


# --- rules -------------------------------------------------------------------

@pytest.mark.parametrize("type,value", [
    ("text", "x"),
    ("textarea", "x"),
    ("number", 0),
    ("date", "2026-10-18"),
])
def test_required_field_needs_a_value(type, value):
    slot = BoundSlot(make("f", type, label="Isian", required=True))
    assert slot.validate({}) == FieldError("f", "required", "Isian wajib diisi")
    assert slot.validate({"f": ""}) is not None
    assert slot.validate({"f": value}) is None


def test_label_falls_back_to_name_in_message():
    slot = BoundSlot(FieldSchema(name="alasan", type="text", required=True))
    assert slot.validate({}).message == "alasan wajib diisi"


@pytest.mark.parametrize("value", [None, False, True])
def test_boolean_required_never_blocks(value):
    slot = BoundSlot(make("ok", "boolean", required=True))
    assert slot.required is False
    assert slot.validate({"ok": value}) is None


def test_optional_fields_accept_missing_values():
    for type in ("text", "number", "date", "select"):
        assert BoundSlot(make("f", type, options=["A"])).validate({}) is None


def test_required_select_without_options_fails_distinctly():
    slot = BoundSlot(make("tipe", "select", label="Tipe", required=True, options=[]))
    error = slot.validate({})
    assert error.kind == "no_options"
    assert error.message == "Tipe tidak memiliki pilihan"


def test_optional_select_without_options_is_fine():
    assert BoundSlot(make("tipe", "select", options=[])).validate({}) is None
