"""
Dataset parsing tests: people records, meeting records, open failures.
"""
import pytest

from spreader_detector.common.errors import InputFormatError, InputOpenError, ResourceError
from spreader_detector.data.loader import (
    Meeting,
    load_people,
    parse_meeting_line,
    parse_spreader_line,
)


class TestLoadPeople:

    def test_loads_records_in_file_order(self, write_file):
        path = write_file("people.in", "Alice 1 30\nBob 2 25.5\n")
        registry, count = load_people(path)

        assert count == 2
        alice, bob = list(registry)
        assert (alice.name, alice.id, alice.age, alice.probability) == ("Alice", 1, 30.0, 0.0)
        assert (bob.name, bob.id, bob.age) == ("Bob", 2, 25.5)

    def test_empty_file_gives_empty_registry(self, write_file):
        registry, count = load_people(write_file("people.in", ""))
        assert count == 0
        assert len(registry) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputOpenError):
            load_people(tmp_path / "does_not_exist.in")

    @pytest.mark.parametrize("line", [
        "Alice 1",              # too few fields
        "Alice 1 30 extra",     # too many fields
        "Alice one 30",         # id not an integer
        "Alice -1 30",          # negative id
        "Alice \u0663 30",      # non-ASCII digit id
        "Alice 1 thirty",       # age not a number
        "",                     # blank record
    ])
    def test_malformed_record(self, write_file, line):
        path = write_file("people.in", f"Bob 2 25\n{line}\n")
        with pytest.raises(InputFormatError) as excinfo:
            load_people(path)
        assert excinfo.value.line_number == 2

    def test_format_error_is_resource_category(self, write_file):
        path = write_file("people.in", "Alice\n")
        with pytest.raises(ResourceError):
            load_people(path)

    def test_line_length_limit(self, write_file):
        path = write_file("people.in", "A" * 20 + " 1 30\n")
        with pytest.raises(InputFormatError, match="exceeds"):
            load_people(path, max_line_length=10)

        registry, count = load_people(path, max_line_length=25)
        assert count == 1


class TestMeetingRecords:

    def test_spreader_line(self):
        assert parse_spreader_line("17", "meetings.in") == 17

    @pytest.mark.parametrize("text", ["", "1 2", "x", "-4", "\u0663"])
    def test_malformed_spreader_line(self, text):
        with pytest.raises(InputFormatError):
            parse_spreader_line(text, "meetings.in")

    def test_meeting_line(self):
        meeting = parse_meeting_line("1 2 1.5 60", "meetings.in", 2)
        assert meeting == Meeting(infector_id=1, infected_id=2, distance=1.5, duration=60.0)

    @pytest.mark.parametrize("text", [
        "1 2 1.5",
        "1 2 1.5 60 9",
        "a 2 1.5 60",
        "1 2 far 60",
    ])
    def test_malformed_meeting_line(self, text):
        with pytest.raises(InputFormatError):
            parse_meeting_line(text, "meetings.in", 3)
