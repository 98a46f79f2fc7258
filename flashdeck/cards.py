from __future__ import annotations
import csv
import io
import json
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CARDS_PATH = DATA_DIR / "cards.json"


@dataclass(frozen=True)
class Card:
    id: int
    question: str
    answer: str


class CardDataError(ValueError):
    """Card data is malformed. Fatal at startup."""


# --------- Unicode cleanup helpers ---------
_INVISIBLES = {
    ord("\u00a0"): " ",  # NBSP
    ord("\u202f"): " ",  # narrow NBSP
    ord("\u2009"): " ",  # thin space
    ord("\u2007"): " ",  # figure space
    ord("\u200a"): " ",  # hair space
    ord("\u200b"): " ",  # zero-width space
    ord("\u2060"): " ",  # WORD JOINER
    ord("\ufeff"): " ",  # BOM / ZWNBSP
}


def _normalize_text(s: str) -> str:
    s = unicodedata.normalize("NFKC", s)
    s = s.translate(_INVISIBLES)
    return s.strip()


# --------- Encoding-robust file read ---------
def _decode(raw: bytes, source: str) -> str:
    """
    Decode card file bytes:
    - Try UTF-8 with BOM first
    - Otherwise use charset-normalizer's best guess
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    probe = from_bytes(raw).best()
    if probe is None or not probe.encoding:
        raise CardDataError(f"Cannot detect text encoding of {source}")
    return raw.decode(probe.encoding, errors="replace")


# --------- Record parsing ---------
def _parse_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid id: {value!r}")
    if isinstance(value, int):
        return value
    s = str(value if value is not None else "").strip()
    if not s or not s.lstrip("-").isdigit():
        raise ValueError(f"Invalid id: {value!r}")
    return int(s)


def record_to_card(record: Dict[str, Any]) -> Card:
    """
    Build a Card from one raw record.
    Required keys: id, question, answer
    """
    if not isinstance(record, dict):
        raise ValueError(f"Expected an object, got {type(record).__name__}")
    card_id = _parse_id(record.get("id"))
    fields = {}
    for name in ("question", "answer"):
        raw = record.get(name)
        if not isinstance(raw, str):
            raise ValueError(f"Missing {name}")
        text = _normalize_text(raw)
        if not text:
            raise ValueError(f"Empty {name}")
        fields[name] = text
    return Card(id=card_id, question=fields["question"], answer=fields["answer"])


def _json_records(text: str, source: str) -> List[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CardDataError(f"{source} is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise CardDataError(f"{source} must contain a JSON array of cards")
    return data


def _csv_records(text: str, source: str) -> List[Dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(text))
    headers = {h.strip() for h in (reader.fieldnames or [])}
    missing = {"id", "question", "answer"} - headers
    if missing:
        raise CardDataError(f"{source} missing columns: {sorted(missing)}")
    return [{(k or "").strip(): v for k, v in row.items()} for row in reader]


def parse_cards(records: List[Dict[str, Any]], source: str = "<cards>") -> Tuple[Card, ...]:
    cards: List[Card] = []
    seen = set()
    for i, record in enumerate(records):
        try:
            card = record_to_card(record)
        except ValueError as e:
            raise CardDataError(f"{source}: record {i}: {e}") from e
        if card.id in seen:
            raise CardDataError(f"{source}: record {i}: duplicate id {card.id}")
        seen.add(card.id)
        cards.append(card)
    return tuple(cards)


# --------- Public API ---------
def load_cards(path: Optional[Path | str] = None) -> Tuple[Card, ...]:
    """
    Load the card set in file order.

    With no path the packaged data/cards.json is used. A path may point at a
    .json file (array of {id, question, answer}) or a .csv file with the
    columns id, question, answer.
    """
    path = Path(path) if path is not None else DEFAULT_CARDS_PATH
    source = str(path)
    if not path.exists():
        raise CardDataError(f"Card file not found: {source}")
    text = _decode(path.read_bytes(), source)
    if path.suffix.lower() == ".csv":
        records = _csv_records(text, source)
    else:
        records = _json_records(text, source)
    return parse_cards(records, source)
