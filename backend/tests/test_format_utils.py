from __future__ import annotations

import pytest

from reporting.format_utils import clamp_for_filename, date_label_to_yyyymmdd, make_output_filename


@pytest.mark.parametrize(
    "label,expected",
    [
        ("5 March 2026", "20260305"),
        ("12 Sept 2025", "20250912"),
        ("31 feb 2026", ""),
        ("March 5, 2026", ""),
        ("", ""),
    ],
)
def test_date_label_to_yyyymmdd(label, expected):
    assert date_label_to_yyyymmdd(label) == expected


def test_clamp_for_filename():
    assert clamp_for_filename("  Ada   Lovelace/O'Neil ") == "Ada_LovelaceONeil"


def test_make_output_filename():
    assert make_output_filename("Ada Lovelace", "5 March 2026") == "Ada_Lovelace_180_20260305.pdf"
    assert make_output_filename("Ada Lovelace", "") == "Ada_Lovelace_180.pdf"
    assert make_output_filename("", "nope") == "CTRL_Observer_180_Report_180.pdf"
