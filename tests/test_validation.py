from funrun.validation import validate, validate_registration


def _fields(**kw):
    fields = {
        "name": "Budi",
        "email": "budi@example.com",
        "phone": "081234567890",
        "address": "Jl. Merdeka No. 10",
    }
    fields.update(kw)
    return fields


def test_valid_form_has_no_errors():
    assert validate(_fields()) == {}


def test_short_fields_flagged_but_two_char_name_is_fine():
    errors = validate({"name": "Al", "email": "bad", "phone": "123", "address": "short"})
    assert set(errors) == {"email", "phone", "address"}
    assert errors["email"] == "Please enter a valid email address"
    assert errors["phone"] == "Phone number must be at least 10 digits"
    assert errors["address"] == "Address must be at least 10 characters"


def test_name_is_trimmed_before_length_check():
    assert validate(_fields(name="  A  "))["name"] == "Name must be at least 2 characters"
    assert "name" not in validate(_fields(name=" Al "))


def test_missing_fields_are_all_reported():
    assert set(validate({})) == {"name", "email", "phone", "address"}


def test_phone_counts_symbols_on_the_client():
    assert "phone" not in validate(_fields(phone="+62 812-34"))
    assert "phone" in validate(_fields(phone="   12345  "))


def test_email_shape():
    assert "email" in validate(_fields(email="a@b"))
    assert "email" in validate(_fields(email="a b@c.com"))
    assert "email" not in validate(_fields(email="a@b.co"))


def test_server_rules_strip_phone_separators():
    details = validate_registration("Budi", "budi@example.com", "+62 (812) 34", None, "Jl. Merdeka No. 10")
    assert details == [{"field": "phone", "message": "phone number must be at least 10 digits"}]


def test_server_rules_instagram_handle():
    ok = validate_registration("Budi", "budi@example.com", "081234567890", "@budi.runs_", "Jl. Merdeka No. 10")
    assert ok == []
    bad = validate_registration("Budi", "budi@example.com", "081234567890", "budi runs!", "Jl. Merdeka No. 10")
    assert [d["field"] for d in bad] == ["instagram_handle"]


def test_server_rules_report_in_form_order():
    details = validate_registration("", "nope", "1", None, "x" * 1001)
    assert [d["field"] for d in details] == ["name", "email", "phone", "address"]
    assert details[0]["message"] == "name is required"
    assert details[3]["message"] == "address must not exceed 1000 characters"
