"""
End-to-end pipeline tests: report order, empty datasets, failure cleanup.
"""
import pytest

from spreader_detector.common.errors import InputFormatError, InputOpenError, OutputOpenError
from spreader_detector.pipeline import run_pipeline


class TestRunPipeline:

    def test_scenario_report(self, scenario_files, params, tmp_path):
        output = tmp_path / "report.out"
        summary = run_pipeline(*scenario_files, params, output_path=output)

        assert output.read_text(encoding='utf-8') == (
            "Carol 3\nMedical supervision required.\n"
            "Bob 2\nMedical supervision required.\n"
            "Alice 1\nMedical supervision required.\n"
        )
        assert summary.people == 3
        assert summary.spreader_id == 1
        assert summary.meetings_applied == 2
        assert summary.category_counts == {
            "medical supervision": 3, "regular quarantine": 0, "clean": 0,
        }

    def test_mixed_categories(self, write_file, params, tmp_path):
        people = write_file("people.in", "Alice 1 30\nBob 2 25\nCarol 3 40\nDan 4 50\n")
        # Bob: 1.0 * (1.5*2)/(2*15) = 0.1 ; Carol: 0.1 * (15*2)/(2*15) = 0.1
        meetings = write_file("meetings.in", "1\n1 2 2.0 1.5\n2 3 4.0 30.0\n")
        output = tmp_path / "report.out"
        summary = run_pipeline(people, meetings, params, output_path=output)

        lines = output.read_text(encoding='utf-8').splitlines()
        assert lines[0:2] == ["Alice 1", "Medical supervision required."]
        assert lines[-2:] == ["Dan 4", "Clean."]
        assert summary.category_counts == {
            "medical supervision": 1, "regular quarantine": 2, "clean": 1,
        }

    def test_empty_people_gives_empty_report(self, write_file, params, tmp_path):
        people = write_file("people.in", "")
        meetings = write_file("meetings.in", "1\n1 2 1.0 1.0\n")
        output = tmp_path / "report.out"

        summary = run_pipeline(people, meetings, params, output_path=output)

        assert output.exists()
        assert output.read_text(encoding='utf-8') == ""
        assert summary.people == 0

    def test_empty_people_missing_meetings(self, write_file, params, tmp_path):
        people = write_file("people.in", "")
        with pytest.raises(InputOpenError):
            run_pipeline(people, tmp_path / "missing.in", params, output_path=tmp_path / "r.out")

    def test_default_output_path(self, scenario_files, params, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        summary = run_pipeline(*scenario_files, params)
        assert (tmp_path / params.output_file).exists()
        assert summary.output_path.name == params.output_file

    def test_failure_removes_stale_report(self, write_file, params, tmp_path):
        output = tmp_path / "report.out"
        output.write_text("stale report from an earlier run\n", encoding='utf-8')
        people = write_file("people.in", "Alice 1 30\nBob two 25\n")
        meetings = write_file("meetings.in", "1\n")

        with pytest.raises(InputFormatError):
            run_pipeline(people, meetings, params, output_path=output)
        assert not output.exists()

    def test_unwritable_output(self, scenario_files, params, tmp_path):
        with pytest.raises(OutputOpenError):
            run_pipeline(*scenario_files, params, output_path=tmp_path)

    def test_verbose_prints_summary(self, scenario_files, params, tmp_path, capsys):
        run_pipeline(*scenario_files, params, output_path=tmp_path / "r.out", verbose=True)
        out = capsys.readouterr().out
        assert "DETECTION SUMMARY" in out
        assert "medical supervision: 3" in out


class TestReportOrder:

    def test_nan_probability_does_not_scramble_order(self, write_file, params, tmp_path):
        people = write_file("people.in", "Ann 1 30\nBob 2 25\nCid 3 40\nDee 4 50\n")
        # Dee 8.0, Ann 1.0, Bob ~0.067, Cid nan (zero distance and duration)
        meetings = write_file("meetings.in", "1\n1 2 2.0 1.0\n1 3 0.0 0.0\n1 4 1.0 60.0\n")
        output = tmp_path / "report.out"

        with pytest.warns(UserWarning):
            summary = run_pipeline(people, meetings, params, output_path=output)

        names = [line.split()[0] for line in output.read_text(encoding='utf-8').splitlines()[0::2]]
        assert names == ["Dee", "Ann", "Bob", "Cid"]
        assert summary.category_counts["clean"] == 2
