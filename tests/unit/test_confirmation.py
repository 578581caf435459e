from backend.chat.confirmation import (
    DETAILS_PLACEHOLDER,
    extract_confirmation,
    find_confirmation_block,
    redact_confirmation,
)

BLOCK = (
    "<service_confirmation>\n"
    "Name: Ana López\n"
    "Phone: 3312345678\n"
    "Details: llanta ponchada\n"
    "Address: Calle Hidalgo 12, Mazamitla\n"
    "</service_confirmation>"
)


def test_extracts_all_fields():
    record = extract_confirmation(f"Listo.\n{BLOCK}\nGracias, Ana.")

    assert record is not None
    assert record.name == "Ana López"
    assert record.phone == "3312345678"
    assert record.details == "llanta ponchada"
    assert record.address == "Calle Hidalgo 12, Mazamitla"


def test_redaction_keeps_surrounding_text_exactly():
    text = f"Antes  \n{BLOCK}\n  Después"

    assert redact_confirmation(text) == "Antes  \n\n  Después"


def test_missing_required_field_yields_none():
    text = BLOCK.replace("Phone: 3312345678\n", "")

    assert extract_confirmation(text) is None
    # The block is still hidden from the user.
    assert "service_confirmation" not in redact_confirmation(text)


def test_blank_details_uses_placeholder():
    record = extract_confirmation(BLOCK.replace("llanta ponchada", ""))

    assert record is not None
    assert record.details == DETAILS_PLACEHOLDER


def test_unclosed_block_is_left_alone():
    partial = BLOCK[: BLOCK.index("</service")]

    assert find_confirmation_block(partial) is None
    assert extract_confirmation(partial) is None
    assert redact_confirmation(partial) == partial


def test_only_first_block_is_used():
    second = BLOCK.replace("Ana López", "Otro")
    text = BLOCK + "\n" + second

    record = extract_confirmation(text)

    assert record is not None
    assert record.name == "Ana López"
    assert redact_confirmation(text) == "\n" + second


def test_first_label_occurrence_wins_and_colons_in_values_survive():
    text = BLOCK.replace("Address: Calle Hidalgo 12, Mazamitla", "Address: Km 3: Carretera\nAddress: otra")

    record = extract_confirmation(text)

    assert record is not None
    assert record.address == "Km 3: Carretera"
