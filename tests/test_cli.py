"""Tests for the command line interface."""

import json
from datetime import date, timedelta

import pytest

from intervalcoach.cli import main


TODAY = date(2024, 6, 30)


@pytest.fixture
def day_file(tmp_path):
    wellness = [
        {
            "date": (TODAY - timedelta(days=i)).isoformat(),
            "hrv": 55 if i % 2 else 45,
            "restingHR": 53 if i % 2 else 57,
            "sleepHours": 7.5,
            "recoveryScore": 70,
        }
        for i in range(14)
    ]
    payload = {
        "today": TODAY.isoformat(),
        "wellness": wellness,
        "fitness": {"ctl": 50, "atl": 55},
        "goal": {"date": (TODAY + timedelta(weeks=20)).isoformat(), "name": "Marmotte"},
        "activities": [{"date": (TODAY - timedelta(days=2)).isoformat(), "type": "Ride"}],
    }
    path = tmp_path / "day.json"
    path.write_text(json.dumps(payload))
    return path


class TestDecideCommand:
    """Tests for `intervalcoach decide`."""

    def test_json_output(self, day_file, tmp_path, capsys):
        code = main([
            "decide", "--input", str(day_file), "--json",
            "--db", str(tmp_path / "b.db"), "--no-enhance",
        ])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["date"] == "2024-06-30"
        assert data["phase"]["phase_name"] == "Base"
        assert data["recovery"]["category"] == "green"
        assert data["baseline"]["hrv"]["mean_30d"] == pytest.approx(50.0)
        assert data["training_gap"]["interpretation"] == "normal"

    def test_today_override(self, day_file, tmp_path, capsys):
        main([
            "decide", "--input", str(day_file), "--json", "--today", "2024-07-20",
            "--db", str(tmp_path / "b.db"), "--no-enhance",
        ])

        data = json.loads(capsys.readouterr().out)
        assert data["date"] == "2024-07-20"

    def test_summary_output(self, day_file, tmp_path, capsys):
        code = main(["decide", "--input", str(day_file), "--db", str(tmp_path / "b.db"), "--no-enhance"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Green (Primed)" in out
        assert "Phase:" in out
        assert "Base" in out

    def test_missing_input_file(self, tmp_path, capsys):
        code = main([
            "decide", "--input", str(tmp_path / "nope.json"),
            "--db", str(tmp_path / "b.db"), "--no-enhance",
        ])

        assert code == 2
        assert "Input file not found" in capsys.readouterr().out

    def test_unwritable_database_reports_error(self, day_file, tmp_path, capsys):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")

        code = main([
            "decide", "--input", str(day_file),
            "--db", str(blocker / "b.db"), "--no-enhance",
        ])

        assert code == 2
        assert "Cannot open baseline database" in capsys.readouterr().out


class TestBaselineCommand:
    """Tests for `intervalcoach baseline`."""

    def test_persists_baseline(self, day_file, tmp_path, capsys):
        db = tmp_path / "b.db"
        code = main(["baseline", "--input", str(day_file), "--db", str(db), "--json"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["rhr"]["mean_30d"] == pytest.approx(55.0)
        assert data["hrv"]["sample_count"] == 14
        assert db.exists()

    def test_not_enough_data(self, tmp_path, capsys):
        path = tmp_path / "day.json"
        path.write_text(json.dumps({"today": "2024-06-30", "wellness": [{"date": "2024-06-30", "hrv": 50}]}))

        code = main(["baseline", "--input", str(path), "--db", str(tmp_path / "b.db")])

        assert code == 2
        out = capsys.readouterr().out
        assert "Insufficient data for baseline" in out
        assert "need 7, have 1" in out


class TestPhaseCommand:
    """Tests for `intervalcoach phase`."""

    def test_phase_for_goal(self, capsys):
        code = main(["phase", "--goal-date", "2024-07-10", "--today", "2024-06-30", "--json"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["phase_name"] == "Taper"
        assert data["weeks_out"] == 2

    def test_phase_without_goal(self, capsys):
        code = main(["phase", "--today", "2024-06-30"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Build" in out
        assert "no goal set" in out
        assert "None" not in out

    def test_invalid_date(self):
        with pytest.raises(SystemExit):
            main(["phase", "--goal-date", "14/09/2024"])

    def test_no_command(self, capsys):
        assert main([]) == 1
