"""Tests for the CSV application store."""

import csv

from sop_writer.models import CSV_HEADERS, FAILED_PROCESSING, ApplicationRecord
from sop_writer.utils.storage import ApplicationStore


def test_load_creates_header_only_file(tmp_path):
    csv_path = tmp_path / "data" / "applications.csv"
    store = ApplicationStore(csv_path)

    assert store.load() == []
    assert csv_path.exists()
    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [CSV_HEADERS]


def test_round_trip_preserves_content_and_order(tmp_path):
    store = ApplicationStore(tmp_path / "applications.csv")
    records = [
        ApplicationRecord(
            candidateName="Asha",
            resumeFile="asha_cv",
            courseInput="https://example.edu/msc-data-science",
            courseName="Data Science",
            universityName="University of Leeds",
            promptPath="/tmp/prompts/data_science_university_of_leeds_prompt.txt",
            sopPath="/tmp/sops/data_science_university_of_leeds_sop.txt",
        ),
        ApplicationRecord(candidateName="Ben", courseInput="MSc Robotics, with commas, and \"quotes\"\nover two lines"),
        ApplicationRecord(candidateName="Asha", courseInput="MBA", promptPath=FAILED_PROCESSING),
    ]

    store.save(records)
    loaded = store.load()

    assert loaded == records
    assert [r.candidate_name for r in loaded] == ["Asha", "Ben", "Asha"]


def test_empty_cells_load_as_absent(tmp_path):
    csv_path = tmp_path / "applications.csv"
    csv_path.write_text(
        ",".join(CSV_HEADERS) + "\nAsha,,Some course text,,,,\n", encoding="utf-8"
    )

    [record] = ApplicationStore(csv_path).load()

    assert record.candidate_name == "Asha"
    assert record.course_input == "Some course text"
    assert record.resume_file is None
    assert record.prompt_path is None
    assert record.sop_path is None


def test_missing_columns_load_as_absent(tmp_path):
    csv_path = tmp_path / "applications.csv"
    csv_path.write_text(
        "candidateName,resumeFile,courseInput,courseName,universityName,promptPath\n"
        "Asha,,text,Data Science,Leeds,/p/x_prompt.txt\n",
        encoding="utf-8",
    )

    [record] = ApplicationStore(csv_path).load()

    assert record.prompt_path == "/p/x_prompt.txt"
    assert record.sop_path is None


def test_save_writes_full_header_schema(tmp_path):
    csv_path = tmp_path / "applications.csv"
    ApplicationStore(csv_path).save([ApplicationRecord(candidateName="Asha", courseInput="text")])

    with open(csv_path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = list(reader)
    assert reader.fieldnames == CSV_HEADERS
    assert rows[0]["candidateName"] == "Asha"
    assert rows[0]["sopPath"] == ""
