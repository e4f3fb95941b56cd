"""Tests for changelog parsing, joining and reading."""

import pytest

from changelog_env.changelog_parser import (
  ChangelogParser,
  CommitRecord,
  changelog_to_text,
  join_commits,
  read_changelog_lines,
)
from changelog_env.exceptions import MalformedSequence, SourceNotFound, SourceReadFailure


@pytest.fixture
def parser():
  return ChangelogParser()


@pytest.fixture
def raw_changelog():
  """Changelog in the raw log format a git checkout leaves in the build dir."""
  return """commit 3f1c2a9e0b7d4c5e6f708192a3b4c5d6e7f80912
tree 9a8b7c6d5e4f30211a2b3c4d5e6f708192a3b4c5
parent 1234567890abcdef1234567890abcdef12345678
author Jane Doe <jane@x.com> 2024-01-01 10:00:00 +0000
committer Jane Doe <jane@x.com> 2024-01-01 10:00:00 +0000

    Add parser

:000000 100644 0000000000000000000000000000000000000000 e69de29bb2d1d6434b8b29ae775ad8c2e48c5391 A\tparser.py

commit 4a2d3b0f1c8e5d6f7a8b9c0d1e2f3a4b5c6d7e8f
tree 0b9c8d7e6f5a4b3c2d1e0f9a8b7c6d5e4f3a2b1c
parent 3f1c2a9e0b7d4c5e6f708192a3b4c5d6e7f80912
author Bob Roe <bob@x.com> 2024-01-02 11:00:00 +0000
committer Bob Roe <bob@x.com> 2024-01-02 11:00:00 +0000

    Fix bug
    in parser

:100644 100644 e69de29bb2d1d6434b8b29ae775ad8c2e48c5391 8baef1b4abc478178b004d62031cf7fe6db6f903 M\tparser.py
"""


class TestParse:
  """Tests for ChangelogParser.parse"""

  def test_end_to_end_scenario(self, parser):
    """Two committers, a blank separator line and an end marker."""
    lines = [
      "committer Jane Doe <jane@x.com>",
      "    Initial commit",
      "",
      "committer Bob Roe <bob@x.com>",
      "    Fix bug",
      None,
    ]

    records = parser.parse(lines)

    assert records == [
      CommitRecord(message="Initial commit", committer="Jane Doe"),
      CommitRecord(message="Fix bug", committer="Bob Roe"),
    ]
    assert join_commits(records) == "Initial commit - Jane Doe\n----\nFix bug - Bob Roe"

  def test_only_end_marker(self, parser):
    records = parser.parse([None])
    assert records == []
    assert join_commits(records) == ""

  def test_empty_input(self, parser):
    assert parser.parse([]) == []

  def test_no_committer_lines(self, parser):
    lines = ["commit abc", "author Jane Doe <jane@x.com> 2024", "", ":100644 M\tfile"]
    assert parser.parse(lines) == []

  def test_record_per_committer_line(self, parser):
    """Every committer line yields a record, even with an empty message."""
    lines = [
      "committer A <a@x>",
      "committer B <b@x>",
      "    only b",
      "committer C <c@x>",
    ]

    records = parser.parse(lines)

    assert [r.committer for r in records] == ["A", "B", "C"]
    assert [r.message for r in records] == ["", "only b", ""]

  def test_message_uses_its_own_committer(self, parser):
    """A finalized record keeps the committer that opened it."""
    lines = ["committer First <f@x>", "    one", "committer Second <s@x>", "    two"]

    records = parser.parse(lines)

    assert records[0] == CommitRecord(message="one", committer="First")
    assert records[1] == CommitRecord(message="two", committer="Second")

  def test_strips_exactly_four_spaces(self, parser):
    lines = ["committer Jane <j@x>", "    abc", "      indented  more "]

    records = parser.parse(lines)

    assert records[0].message == "abc  indented  more "

  def test_multiline_message_concatenated(self, parser):
    lines = ["committer Jane <j@x>", "    Fix bug", "    in parser"]
    assert parser.parse(lines)[0].message == "Fix bugin parser"

  def test_ignores_lines_with_less_indent(self, parser):
    lines = ["committer Jane <j@x>", "   three spaces", "\tTab", "    kept"]
    assert parser.parse(lines)[0].message == "kept"

  def test_committer_name_is_shortest_match(self, parser):
    lines = ["committer Jane Doe <jane@x.com> 1700000000 +0100 <extra>"]
    assert parser.parse(lines)[0].committer == "Jane Doe"

  def test_committer_matched_anywhere_in_line(self, parser):
    lines = ["xx committer Jane <j@x>", "    msg"]
    assert parser.parse(lines) == [CommitRecord(message="msg", committer="Jane")]

  def test_stops_at_end_marker(self, parser):
    lines = ["committer Jane <j@x>", "    kept", None, "    dropped", "committer Bob <b@x>"]
    assert parser.parse(lines) == [CommitRecord(message="kept", committer="Jane")]

  def test_accepts_generator(self, parser):
    lines = (line for line in ["committer Jane <j@x>", "    msg"])
    assert parser.parse(lines) == [CommitRecord(message="msg", committer="Jane")]

  def test_message_before_committer_ignored(self, parser):
    lines = ["    orphan", "committer Jane <j@x>", "    msg"]
    assert parser.parse(lines) == [CommitRecord(message="msg", committer="Jane")]

  def test_message_before_committer_strict(self):
    parser = ChangelogParser(strict=True)

    with pytest.raises(MalformedSequence) as exc_info:
      parser.parse(["commit abc", "    orphan", "committer Jane <j@x>"])

    assert exc_info.value.name == "MALFORMED_SEQUENCE"
    assert exc_info.value.source == "parse"
    assert "line 2" in exc_info.value.description

  def test_printer_receives_names_and_message_lines(self, parser):
    printed = []
    lines = ["committer Jane <j@x>", "    msg", "", "committer Bob <b@x>"]

    parser.parse(lines, printer=printed.append)

    assert printed == ["Jane", "    msg", "Bob"]

  def test_raw_changelog(self, parser, raw_changelog):
    records = parser.parse(raw_changelog.splitlines())

    assert records == [
      CommitRecord(message="Add parser", committer="Jane Doe"),
      CommitRecord(message="Fix bugin parser", committer="Bob Roe"),
    ]

  def test_parse_does_not_share_state(self, parser):
    parser.parse(["committer Jane <j@x>", "    first"])
    assert parser.parse(["    orphan"]) == []


class TestJoinCommits:
  def test_join(self):
    records = [CommitRecord(message="A", committer="Jane"), CommitRecord(message="B", committer="Bob")]
    assert join_commits(records) == "A - Jane\n----\nB - Bob"

  def test_single_record_has_no_separator(self):
    assert join_commits([CommitRecord(message="A", committer="Jane")]) == "A - Jane"


class TestReadChangelog:
  """Tests for reading changelog files from disk"""

  def test_reads_lines_without_terminators(self, tmp_path):
    path = tmp_path / "changelog.xml"
    path.write_bytes(b"committer Jane <j@x>\r\n    caf\xc3\xa9\n\n    last")

    assert read_changelog_lines(path) == ["committer Jane <j@x>", "    café", "", "    last"]

  def test_empty_file(self, tmp_path):
    path = tmp_path / "changelog.xml"
    path.write_text("")
    assert read_changelog_lines(path) == []

  def test_missing_file(self, tmp_path):
    with pytest.raises(SourceNotFound) as exc_info:
      read_changelog_lines(tmp_path / "changelog.xml")
    assert exc_info.value.to_report().name == "SOURCE_NOT_FOUND"

  def test_directory_is_not_a_source(self, tmp_path):
    with pytest.raises(SourceNotFound):
      read_changelog_lines(tmp_path)

  def test_invalid_utf8(self, tmp_path):
    path = tmp_path / "changelog.xml"
    path.write_bytes(b"committer Jane <j@x>\n    \xff\xfe\n")

    with pytest.raises(SourceReadFailure) as exc_info:
      read_changelog_lines(path)

    assert exc_info.value.caused_by.startswith("UnicodeDecodeError")

  def test_changelog_to_text(self, tmp_path, raw_changelog):
    path = tmp_path / "changelog.xml"
    path.write_text(raw_changelog, encoding="utf-8")

    assert changelog_to_text(path) == "Add parser - Jane Doe\n----\nFix bugin parser - Bob Roe"
