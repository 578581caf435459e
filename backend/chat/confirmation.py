"""Extraction of the ``<service_confirmation>`` block from model output.

The block carries the intake record the model assembled during the
conversation::

    <service_confirmation>
    Name: <value>
    Phone: <value>
    Details: <value>
    Address: <value>
    </service_confirmation>

Only the first closed block of a text is considered. It is parsed line by
line instead of with a backtracking pattern, so an unclosed or partial block
simply yields ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass

OPEN_TAG = "<service_confirmation>"
CLOSE_TAG = "</service_confirmation>"
LABELS = ("Name", "Phone", "Details", "Address")
DETAILS_PLACEHOLDER = "No especificado"


@dataclass(frozen=True, slots=True)
class ConfirmationRecord:
    """Structured service request captured from a confirmation block."""

    name: str
    phone: str
    details: str
    address: str


@dataclass(frozen=True, slots=True)
class ConfirmationBlock:
    """A closed block located in a text, with its raw label values."""

    start: int
    end: int
    fields: dict[str, str]

    def to_record(self) -> ConfirmationRecord | None:
        name = self.fields.get("Name", "")
        phone = self.fields.get("Phone", "")
        address = self.fields.get("Address", "")
        if not (name and phone and address):
            return None
        return ConfirmationRecord(
            name=name,
            phone=phone,
            details=self.fields.get("Details") or DETAILS_PLACEHOLDER,
            address=address,
        )


def find_confirmation_block(text: str) -> ConfirmationBlock | None:
    """Locate the first closed block; ``None`` when absent or still open."""

    start = text.find(OPEN_TAG)
    if start < 0:
        return None
    body_start = start + len(OPEN_TAG)
    close = text.find(CLOSE_TAG, body_start)
    if close < 0:
        return None
    return ConfirmationBlock(
        start=start,
        end=close + len(CLOSE_TAG),
        fields=_parse_fields(text[body_start:close]),
    )


def extract_confirmation(text: str) -> ConfirmationRecord | None:
    """Return the record carried by ``text`` when its required fields are set."""

    block = find_confirmation_block(text)
    if block is None:
        return None
    return block.to_record()


def redact_confirmation(text: str) -> str:
    """Remove the first closed block and leave every other character as is."""

    block = find_confirmation_block(text)
    if block is None:
        return text
    return text[: block.start] + text[block.end :]


def _parse_fields(body: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for line in body.splitlines():
        label, sep, value = line.partition(":")
        if not sep:
            continue
        label = label.strip()
        # First occurrence of a label wins.
        if label in LABELS and label not in fields:
            fields[label] = value.strip()
    return fields
