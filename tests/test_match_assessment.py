"""Unit tests for the match_assessment job."""
import json

import pandas as pd
import pytest

from src.jobs.match_assessment import main


def write_json(path, payload):
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return str(path)


class TestAnswersInput:
    """Test the job rejects unusable answers files."""

    def test_missing_file(self, tmp_path):
        """Test a missing answers file exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--answers", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 1

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON exits with status 1."""
        answers = write_json(tmp_path / "answers.json", "{not json")
        with pytest.raises(SystemExit) as exc_info:
            main(["--answers", answers])
        assert exc_info.value.code == 1

    def test_not_an_object(self, tmp_path):
        """Test a JSON list exits with status 1."""
        answers = write_json(tmp_path / "answers.json", ["memory"])
        with pytest.raises(SystemExit) as exc_info:
            main(["--answers", answers])
        assert exc_info.value.code == 1

    def test_non_string_values(self, tmp_path):
        """Test answer values that are neither strings nor lists exit with status 1."""
        answers = write_json(tmp_path / "answers.json", {"primary-concern": 5})
        with pytest.raises(SystemExit) as exc_info:
            main(["--answers", answers])
        assert exc_info.value.code == 1


class TestMatchOutput:
    """Test a full run against a communities export."""

    def test_writes_matches(self, tmp_path):
        """Test matches are written to the output CSV."""
        answers = write_json(tmp_path / "answers.json", {
            "primary-concern": "memory",
            "dementia-diagnosis": "yes-advanced",
        })
        communities_path = tmp_path / "communities.csv"
        communities_path.write_text(
            "id,name,care_types,rating,zip\n"
            "1,Maple Grove,Assisted Living,4.0,44107\n"
            "2,Lakeside Memory,Memory Care,4.5,44107\n"
        )
        out_path = tmp_path / "out" / "matches.csv"

        main([
            "--answers", answers,
            "--communities", str(communities_path),
            "--zip", "44102",
            "--out", str(out_path),
        ])

        df = pd.read_csv(out_path, dtype={"community_id": str})
        assert list(df["community_id"]) == ["2"]
        assert df.loc[0, "reason_text"] == "Specialized memory care program"
        assert df.loc[0, "distance_miles"] > 0
