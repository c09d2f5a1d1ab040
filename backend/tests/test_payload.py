from __future__ import annotations

import base64
import json

import pytest

from services.payload import (
    PayloadError,
    dig,
    first_present,
    normalise_input,
    read_payload,
    split_in_two,
)


def _b64(obj, urlsafe: bool = False, strip_padding: bool = False) -> str:
    raw = json.dumps(obj).encode("utf-8")
    encoded = (base64.urlsafe_b64encode(raw) if urlsafe else base64.b64encode(raw)).decode("ascii")
    return encoded.rstrip("=") if strip_padding else encoded


def test_read_payload_standard_and_url_safe():
    obj = {"fullName": "Ada Lovelace", "n": [1, 2, 3], "s": "~~~???>>>"}
    assert read_payload(_b64(obj)) == obj
    assert read_payload(_b64(obj, urlsafe=True, strip_padding=True)) == obj


def test_read_payload_tolerates_plus_turned_into_space():
    obj = {"s": "~~~???>>>"}
    encoded = _b64(obj)
    assert "+" in encoded or "/" in encoded
    assert read_payload(encoded.replace("+", " ")) == obj


@pytest.mark.parametrize(
    "data,message",
    [
        (None, "Missing data"),
        ("   ", "Missing data"),
        ("!!!not base64!!!", "Bad data base64"),
        (base64.b64encode(b"{not json").decode(), "Bad data JSON"),
        (base64.b64encode(b"[1, 2]").decode(), "Parsed data not an object"),
    ],
)
def test_read_payload_errors(data, message):
    with pytest.raises(PayloadError) as exc:
        read_payload(data)
    assert str(exc.value) == message


def test_first_present_skips_empty_values():
    payload = {"identity": {"fullName": "  "}, "fullName": "Fallback"}
    strategies = [dig("identity", "fullName"), dig("fullName")]
    assert first_present(payload, strategies) == "Fallback"
    assert first_present({}, strategies, "none") == "none"
    assert dig("a", "b")({"a": "not a dict"}) is None


def test_split_in_two_prefers_sentence_boundary():
    assert split_in_two("One. Two. Three. Four.") == ("One. Two.", "Three. Four.")
    assert split_in_two("One. Two. Three.") == ("One. Two.", "Three.")
    assert split_in_two("abcdef") == ("abc", "def")
    assert split_in_two("") == ("", "")


def test_normalise_input_reads_nested_and_flat_locations():
    payload = {
        "identity": {"fullName": "Ada  Lovelace", "dateLabel": "5 March 2026"},
        "ctrl": {"bands": {"C_low": 3}, "dominantKey": "C"},
        "secondKey": "T",
        "chartUrl": "https://example.com/chart.png",
        "text": {
            "exec_summary": "First sentence. Second sentence.",
            "exec_summary_q1": "Q1: What now?",
            "exec_summary_q3": "",
            "adapt_with_leaders_q1": "Leader one?",
            "adapt_with_leaders_q2": "Leader two?",
            "adapt_with_colleagues": "Work – together.",
        },
        "actions": {"actions1": "Do one"},
        "Act2": "Do two",
    }
    fields = normalise_input(payload)
    assert fields.full_name == "Ada Lovelace"
    assert fields.date_label == "5 March 2026"
    assert fields.bands == {"C_low": 3}
    assert fields.band_values is None
    assert fields.dom_hint == "C"
    assert fields.second_hint == "T"
    assert fields.chart_url == "https://example.com/chart.png"
    assert fields.exec_summary == ("First sentence.", "Second sentence.")
    assert fields.exec_questions == ["Q1: What now?"]
    assert fields.leader_questions == ["Leader two?", "Leader one?"]
    assert fields.adapt_colleagues == "Work - together."
    assert fields.actions == ["Do one", "Do two", ""]


def test_normalise_input_band_values_list():
    fields = normalise_input({"bandValues": [1, 2, 3], "bands": "not a dict"})
    assert fields.band_values == [1, 2, 3]
    assert fields.bands == {}


def test_normalise_input_of_empty_payload():
    fields = normalise_input({})
    assert fields.full_name == ""
    assert fields.exec_summary == ("", "")
    assert fields.actions == ["", "", ""]
