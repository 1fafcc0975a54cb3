"""Builders and hypothesis strategies shared by the test modules."""

import uuid
from datetime import date, datetime

from hypothesis import strategies as st

from tradeflow.models import Direction, JournalEntry, JournalEntryInput, Outcome


POIS = ["Order Block", "Fair Value Gap", "Liquidity Pool"]
REACTIONS = ["Strong Rejection", "Consolidation", "Breakthrough"]
PREMARKET = ["Sweep", "Run", "Fair Value Area"]
ENTRY_TYPES = ["Market", "Limit", "Stop"]
SESSIONS = ["London", "New York", "Asian"]

# Halves are exact in binary, so RR sums compare exactly
RR_VALUES = [0.5, 1.0, 1.5, 2.0, 2.5, 3.0]


def form_data(**overrides) -> dict:
    data = {
        "pair": "EUR/USD",
        "date": date(2024, 1, 1),
        "direction": Direction.LONG,
        "premarket_condition": ["Sweep"],
        "poi": ["Order Block"],
        "reaction_to_poi": ["Strong Rejection"],
        "entry_type": "Limit",
        "session": "London",
        "psychology": [],
        "outcome": Outcome.WIN,
        "rr_ratio": 2.0,
        "tp": ["Liquidity"],
        "sl": ["Structure"],
    }
    data.update(overrides)
    return data


def make_form(**overrides) -> JournalEntryInput:
    return JournalEntryInput(**form_data(**overrides))


def make_entry(**overrides) -> JournalEntry:
    data = form_data()
    data.update({"id": uuid.uuid4().hex, "owner": "alice", "created_at": datetime(2024, 1, 1, 12)})
    data.update(overrides)
    return JournalEntry(**data)


def tag_lists(values: list[str]):
    return st.lists(st.sampled_from(values), min_size=1, max_size=len(values), unique=True)


def entry_strategy(owner: str = "alice"):
    """Generate valid stored journal entries."""
    return st.builds(
        make_entry,
        owner=st.just(owner),
        date=st.dates(min_value=date(2023, 1, 1), max_value=date(2025, 12, 31)),
        direction=st.sampled_from(list(Direction)),
        premarket_condition=tag_lists(PREMARKET),
        poi=tag_lists(POIS),
        reaction_to_poi=tag_lists(REACTIONS),
        entry_type=st.sampled_from(ENTRY_TYPES),
        session=st.sampled_from(SESSIONS),
        outcome=st.sampled_from(list(Outcome)),
        rr_ratio=st.one_of(st.none(), st.sampled_from(RR_VALUES)),
    )
