"""Tests for the command line interface."""

import json

from spac_os.__main__ import main


class TestValidateCommand:

    def test_accepted(self, capsys):
        assert main(["validate", "filing", "filed", "sec_comment"]) == 0
        assert "OK: FILED -> SEC_COMMENT" in capsys.readouterr().out

    def test_rejected(self, capsys):
        assert main(["validate", "SPAC", "COMPLETED", "SEARCHING"]) == 1
        assert "Cannot transition from COMPLETED to SEARCHING" in capsys.readouterr().out

    def test_unknown_status(self):
        assert main(["validate", "SPAC", "COMPLETED", "BANKRUPT"]) == 1

    def test_unknown_entity_type(self, caplog):
        assert main(["validate", "board_meeting", "scheduled", "held"]) == 1
        assert "Unknown entity type: BOARD_MEETING" in caplog.text


class TestTransitionsCommand:

    def test_lists_next_statuses(self, capsys):
        assert main(["transitions", "SPAC", "LIQUIDATING"]) == 0
        assert capsys.readouterr().out.strip() == "LIQUIDATED"

    def test_terminal(self, capsys):
        assert main(["transitions", "FILING", "WITHDRAWN"]) == 0
        assert "terminal" in capsys.readouterr().out


class TestScoreCommand:

    def test_score_json(self, tmp_path, capsys):
        input_path = tmp_path / "score.json"
        input_path.write_text(json.dumps({
            "target": {"name": "Acme Health", "revenue": 100_000_000, "industry_focus": ["Healthcare"]},
            "criteria": {"ticker": "GACQ", "trust_amount": 40_000_000, "target_sectors": ["healthcare services"]},
        }))
        assert main(["score", str(input_path), "--json"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["size_score"] == 70
        assert result["sector_score"] == 90
        assert result["overall_score"] == 72

    def test_score_report(self, tmp_path, capsys):
        input_path = tmp_path / "score.json"
        input_path.write_text(json.dumps({"target": {"name": "Acme"}, "criteria": {}}))
        assert main(["score", str(input_path)]) == 0
        out = capsys.readouterr().out
        assert "FIT SCORE: 54/100" in out
        assert "Moderate fit" in out

    def test_missing_file(self, tmp_path):
        assert main(["score", str(tmp_path / "missing.json")]) == 1
