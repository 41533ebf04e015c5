"""
Netlist export test: SyncFIFO elaborates and converts to RTLIL for a few
geometries, and bad parameters are rejected before conversion.
"""

import sys, os

sys.path.insert(
    0,
    os.path.join(os.path.dirname(__file__), "..", "..", "src", "hardware"),
)

import pytest

from top import export, main


@pytest.mark.parametrize("word_width,address_width", [(9, 2), (8, 4), (1, 1)])
def test_export_rtlil(word_width, address_width):
    text = export(word_width, address_width, name="fifo_under_test")
    assert "module \\fifo_under_test" in text
    for port in ["rst", "write_request", "write_data", "read_request",
                 "read_data", "empty", "full", "error"]:
        assert port in text, f"port {port} missing from netlist"


def test_export_unguarded():
    text = export(9, 2, guard_simultaneous=False)
    assert "module \\sync_fifo" in text


def test_export_rejects_bad_parameters():
    with pytest.raises(ValueError):
        export(0, 2)
    with pytest.raises(ValueError):
        export(8, 2, fmt="edif")


def test_export_cli_writes_file(tmp_path, monkeypatch):
    out = tmp_path / "fifo.il"
    monkeypatch.setattr(sys, "argv", ["sync-fifo-export", "--word-width", "9",
                                      "--address-width", "2", "-o", str(out)])
    main()
    assert "module \\sync_fifo" in out.read_text()
