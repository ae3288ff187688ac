"""GEDCOM and JSON import into Person / Relationship records."""

import json
from pathlib import Path
import re
from typing import Any

from ged4py import GedcomReader

from models import DIVORCED, PARENT, SPOUSE, Person, Relationship

# Qualifiers such as "ABT 1905", "Bef. 1800", "(about:1746-00-00)"
_QUALIFIER = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|INT|CIRCA|CA\.?|AROUND|C\.):?\s*",
    flags=re.IGNORECASE,
)
_YEAR = re.compile(r"(?<!\d)(\d{3,4})(?!\d)")


MONTH_MAP = {
    "JAN": 1, "JANUARY": 1,
    "FEB": 2, "FEBRUARY": 2,
    "MAR": 3, "MARCH": 3,
    "APR": 4, "APRIL": 4,
    "MAY": 5,
    "JUN": 6, "JUNE": 6,
    "JUL": 7, "JULY": 7,
    "AUG": 8, "AUGUST": 8,
    "SEP": 9, "SEPT": 9, "SEPTEMBER": 9,
    "OCT": 10, "OCTOBER": 10,
    "NOV": 11, "NOVEMBER": 11,
    "DEC": 12, "DECEMBER": 12,
}  # fmt: skip

# (pattern, field order): y year, m numeric month, M month name, d day
_DATE_FORMATS = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), "ymd"),  # 1839-08-29, 1746-00-00
    (re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$"), "dMy"),  # 25 NOV 1954, 02 May1838
    (re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$"), "My"),  # JAN 1905, May, 1837
    (re.compile(r"^(\d{4})$"), "y"),
    (re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$"), "mdy"),  # 01-27-1920, 1/15/1957
    (re.compile(r"^(\d{1,2})\s+(\d{1,2})\s+(\d{4})$"), "mdy"),  # 04 05 1911
    (re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$"), "Mdy"),  # Oct.12,1929
]


def _clean_date(date_str: str) -> str:
    s = str(date_str).strip().strip("()").rstrip("?").strip()
    return _QUALIFIER.sub("", s).strip()


def extract_year(date_str: str | None) -> int | None:
    """
    Pull the year out of a GEDCOM or free-form date string.

    Only year precision matters for layout, so this reads the first three or
    four digit run after dropping qualifiers. For ranges ("BET 1850 AND 1860")
    and dual dates ("1750/51") that is the earlier year.

    Handles formats like "25 NOV 1954", "ABT 1905", "(05/15/1923)",
    "(1839-08-29)", "(02 May1838)", "(Oct.12,1929)" and "1789?".
    Returns None if no year can be found.
    """
    if not date_str:
        return None

    match = _YEAR.search(_clean_date(date_str))
    if match is None:
        return None
    return int(match.group(1))


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a GEDCOM or free-form date string into ISO format (YYYY-MM-DD).

    Missing month or day default to 1, as does a "00" month or day in an
    ISO-like input. Ranges such as "BET 1850 AND 1860" and anything else
    that does not match a known format return None.
    """
    if not date_str:
        return None

    s = _clean_date(date_str)
    for pattern, order in _DATE_FORMATS:
        match = pattern.match(s)
        if match is None:
            continue
        parts = dict(zip(order, match.groups()))
        year = int(parts["y"])
        if "M" in parts:
            month = MONTH_MAP.get(parts["M"].upper().rstrip("."))
        else:
            month = int(parts.get("m", 1))
        day = int(parts.get("d", 1))
        if order == "ymd":
            month, day = month or 1, day or 1
        if month and 1 <= month <= 12 and 1 <= day <= 31:
            return f"{year:04d}-{month:02d}-{day:02d}"
    return None


def normalize_xref(xref_id: str) -> str:
    """Turn a GEDCOM xref like '@I_347421849@' into a plain id 'I_347421849'."""
    value = xref_id.strip().strip("@")
    if not value:
        raise ValueError(f"Empty GEDCOM reference: {xref_id!r}")
    return value


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name_parts(indi) -> tuple[str, str | None, str | None]:
    """Extract full name, given name, and surname from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("Unknown", None, None)

    # ged4py returns NAME as a (given, surname, suffix) tuple
    if isinstance(name_rec.value, tuple):
        given, surname, suffix = name_rec.value
        full_name = " ".join(p for p in (given, surname, suffix) if p) or "Unknown"
        return (full_name, given or None, surname or None)

    full_name = str(name_rec.value).replace("/", "").strip() or "Unknown"
    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    return (full_name, givn.value if givn else None, surn.value if surn else None)


def extract_event_year(rec, tag: str) -> int | None:
    """Year of an event tag (BIRT, DEAT, ...) or None."""
    event = rec.sub_tag(tag)
    if event is None:
        return None
    date_rec = event.sub_tag("DATE")
    if date_rec is None or not date_rec.value:
        return None
    # ged4py may hand back DateValue objects; their str() is GEDCOM text
    return extract_year(str(date_rec.value))


def normalize_data(reader: GedcomReader) -> tuple[list[Person], list[Relationship]]:
    """
    Extract persons and relationships from parsed GEDCOM data.

    Each FAM record yields a partner relationship between HUSB and WIFE
    ("divorced" when the family has a DIV event, else "spouse") and a parent
    relationship from each partner to each CHIL.
    """
    persons: list[Person] = []
    relationships: list[Relationship] = []

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        full_name, given_name, surname = extract_name_parts(rec)
        sex_rec = rec.sub_tag("SEX")

        persons.append(
            Person(
                id=normalize_xref(rec.xref_id),
                name=full_name,
                given_name=given_name,
                surname=surname,
                sex=sex_rec.value if sex_rec else None,
                birth_year=extract_event_year(rec, "BIRT"),
                death_year=extract_event_year(rec, "DEAT"),
            )
        )

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue

        partners = []
        for tag in ("HUSB", "WIFE"):
            ref = rec.sub_tag(tag)
            if ref is not None and ref.xref_id:
                partners.append(normalize_xref(ref.xref_id))

        if len(partners) == 2:
            kind = DIVORCED if rec.sub_tag("DIV") is not None else SPOUSE
            relationships.append(Relationship(partners[0], partners[1], kind))

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = normalize_xref(child.xref_id)
            for parent_id in partners:
                relationships.append(Relationship(parent_id, child_id, PARENT))

    return persons, relationships


def _first(entry: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if entry.get(key) is not None:
            return entry[key]
    return None


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def records_from_dict(data: dict[str, Any]) -> tuple[list[Person], list[Relationship]]:
    """
    Build records from a JSON-style mapping.

    Expected shape::

        {"people": [{"id": "a", "name": "Ann", "birth_year": 1950}, ...],
         "relationships": [{"from": "a", "to": "b", "type": "parent"}, ...]}

    The field spellings of the web application export (full_name,
    from_person_id, to_person_id, relationship_type, gender) are accepted too.

    Raises:
        ValueError: an entry without an id or endpoints, or a non-numeric year
    """
    persons: list[Person] = []
    for entry in data.get("people", []):
        person_id = _first(entry, "id")
        if person_id is None:
            raise ValueError(f"Person entry without an id: {entry!r}")
        persons.append(
            Person(
                id=str(person_id),
                name=_first(entry, "name", "full_name") or "Unknown",
                given_name=_first(entry, "given_name"),
                surname=_first(entry, "surname"),
                sex=_first(entry, "sex", "gender"),
                birth_year=_optional_int(_first(entry, "birth_year")),
                death_year=_optional_int(_first(entry, "death_year")),
            )
        )

    relationships: list[Relationship] = []
    for entry in data.get("relationships", []):
        a = _first(entry, "person1_id", "from_person_id", "from")
        b = _first(entry, "person2_id", "to_person_id", "to")
        kind = _first(entry, "relationship_type", "type")
        if a is None or b is None or kind is None:
            raise ValueError(f"Relationship entry missing endpoints or type: {entry!r}")
        relationships.append(Relationship(str(a), str(b), str(kind)))

    return persons, relationships


def load_json(filepath: Path) -> tuple[list[Person], list[Relationship]]:
    """Read people and relationships from a JSON file."""
    with open(filepath, encoding="utf-8") as fh:
        return records_from_dict(json.load(fh))


def load_records(filepath: Path) -> tuple[list[Person], list[Relationship]]:
    """Read records from a .ged or .json file, chosen by extension."""
    if filepath.suffix.lower() == ".ged":
        return normalize_data(parse_gedcom(filepath))
    return load_json(filepath)
