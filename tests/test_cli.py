import os

os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")

import json

from cli import main


def test_generate_json(capsys):
    code = main(["generate", "--start", "2025-10-01", "--end", "2025-10-03", "--lat", "52.0705", "--lon", "4.3007", "--json"])
    assert code == 0
    records = json.loads(capsys.readouterr().out)
    assert [r["date"] for r in records] == ["2025-10-01", "2025-10-02", "2025-10-03"]
    assert all(r["isWaxing"] for r in records)


def test_generate_text(capsys):
    assert main(["generate", "--start", "2025-10-07", "--end", "2025-10-07", "--lat", "52.0705", "--lon", "4.3007"]) == 0
    line = capsys.readouterr().out.strip()
    assert line.startswith("2025-10-07")
    assert "FULL_MOON" in line


def test_generate_rejects_bad_coordinates(capsys):
    assert main(["generate", "--start", "2025-10-01", "--end", "2025-10-01", "--lat", "95", "--lon", "0"]) == 2
    assert "Invalid latitude" in capsys.readouterr().err
