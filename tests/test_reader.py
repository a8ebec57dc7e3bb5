# ==============================================
# Tests for BeaconReader
# ==============================================
#
# Header scan, body scan with recovery, deferred checks,
# handlers, accessors and serialization.
# ==============================================

import pytest

from beacon.errors import ArgumentError, ErrorKind, ValidationError
from beacon.reader.beacon_reader import BeaconReader, Phase


# ==============================================
# Header
# ==============================================

class TestHeader:

    def test_meta_is_ready_after_construction(self, reader_factory):
        reader = reader_factory("#FORMAT: PND-BEACON\n#PREFIX: http://d-nb.info/gnd/\n118540238\n")
        assert reader.meta("format") == "PND-BEACON"
        assert reader.meta() == {"FORMAT": "PND-BEACON", "PREFIX": "http://d-nb.info/gnd/"}
        assert reader.phase() == Phase.BODY
        assert reader.errorcount() == 0

    def test_byte_order_mark_is_stripped(self, reader_factory):
        reader = reader_factory("\ufeff#NAME: x\na:b\n")
        assert reader.meta("NAME") == "x"
        assert reader.errorcount() == 0

    def test_separators(self, reader_factory):
        reader = reader_factory("#NAME=one\n#INSTITUTION two\n#MESSAGE:three\n")
        assert reader.meta("NAME") == "one"
        assert reader.meta("INSTITUTION") == "two"
        assert reader.meta("MESSAGE") == "three"

    def test_blank_lines_and_comments_in_header(self, reader_factory):
        reader = reader_factory("#NAME: x\n\n# just a note\n#FEED: http://example.com/b.txt\na:b\n")
        assert reader.meta("FEED") == "http://example.com/b.txt"
        assert reader.errorcount() == 0

    def test_bad_header_lines_are_recorded_and_skipped(self, reader_factory):
        reader = reader_factory("#FORMAT: FOO\n#PREFIX: http://example.org/\n#~: x\nabc\n")
        assert reader.errorcount() == 2
        assert reader.meta("PREFIX") == "http://example.org/"
        assert reader.lasterror() == ('invalid meta name: "~"', 3, "#~: x")
        assert reader.lasterror_kind() == ErrorKind.VALIDATION

        assert reader.nextlink() == ("abc", "", "", "", "http://example.org/abc", "")

    def test_header_only(self, reader_factory):
        reader = reader_factory("#NAME: x\n")
        assert reader.nextlink() is None
        assert reader.phase() == Phase.DONE
        assert reader.line() == 1


# ==============================================
# Body
# ==============================================

class TestBody:

    def test_blank_and_comment_lines(self, reader_factory):
        reader = reader_factory("\nid:1|t:1\n|comment\n")
        assert reader.nextlink() == ("id:1", "", "", "t:1", "id:1", "t:1")
        assert reader.nextlink() is None
        assert reader.errorcount() == 0
        assert reader.line() == 3

    def test_link_is_remembered(self, reader_factory):
        reader = reader_factory("a:1\na:2\n")
        reader.nextlink()
        assert reader.link().id == "a:1"
        reader.nextlink()
        assert reader.link().id == "a:2"
        reader.nextlink()
        assert reader.link().id == "a:2"

    def test_id_must_be_uri(self, reader_factory):
        reader = reader_factory("abc\nx:y\n")
        assert reader.nextlink().id == "x:y"
        assert reader.errorcount() == 1
        assert reader.lasterror() == ("id must be URI", 1, "abc")
        assert reader.lasterror_kind() == ErrorKind.PARSE

    def test_too_many_parts_does_not_stop_the_pass(self, reader_factory):
        reader = reader_factory("a:b|1|2|x:y|3\nc:d\n")
        assert reader.nextlink().id == "c:d"
        assert reader.errorcount() == 1
        assert reader.lasterror().message == "found too many parts (>4), divided by '|' characters"
        assert reader.lasterror().line == 1

    def test_hash_lines_in_body_are_ignored(self, reader_factory):
        reader = reader_factory("a:1\n#NAME: late\na:2\n")
        assert [link.id for link in reader] == ["a:1", "a:2"]
        assert reader.meta("NAME") is None
        assert reader.errorcount() == 0

    def test_target_template_label(self, reader_factory):
        reader = reader_factory("#TARGET: f:{LABEL}\na:b|c:d\n")
        assert reader.nextlink().full_target == "f:c:d"

    def test_target_template_id(self, reader_factory):
        reader = reader_factory("#TARGET: f:{ID}\na:b|c:d\n")
        assert reader.nextlink().full_target == "f:a:b"

    def test_target_template_overrides_fourth_field(self, reader_factory):
        reader = reader_factory("#TARGET: f:{ID}\na:b|lab|dsc|x:y\n")
        link = reader.nextlink()
        assert link.target == "x:y"
        assert link.full_target == "f:a:b"

    def test_meta_changes_do_not_affect_running_pass(self, reader_factory):
        reader = reader_factory("#PREFIX: x:\n1\n2\n")
        assert reader.nextlink().full_id == "x:1"
        reader.meta("PREFIX", "y:")
        assert reader.nextlink().full_id == "x:2"
        assert reader.meta("PREFIX") == "y:"

    def test_done_is_terminal(self, reader_factory):
        reader = reader_factory("#COUNT: 5\na:b\n")
        assert reader.nextlink() is not None
        assert reader.nextlink() is None
        assert reader.errorcount() == 1
        assert reader.nextlink() is None
        assert reader.errorcount() == 1


# ==============================================
# Deferred checks
# ==============================================

class TestConsistency:

    def test_count_mismatch(self, reader_factory):
        reader = reader_factory("#COUNT: 2\nx:y\n")
        assert reader.parse() is False
        assert reader.lasterror() == ("expected 2 links, but got 1", 2, "")
        assert reader.lasterror_kind() == ErrorKind.CONSISTENCY

    def test_count_match(self, reader_factory):
        reader = reader_factory("#COUNT: 2\nx:y\nx:z\n")
        assert reader.parse() is True
        assert reader.count() == 2

    def test_missing_example(self, reader_factory):
        reader = reader_factory("#EXAMPLES: a:b|c\na:b\n")
        assert reader.parse() is False
        assert str(reader.lasterror()) == "examples not found: c"

    def test_examples_are_prefix_expanded(self, reader_factory):
        reader = reader_factory("#PREFIX: http://example.org/\n#EXAMPLES: 1|2\n1\n2\n")
        assert reader.parse() is True

    def test_both_checks_recorded(self, reader_factory):
        reader = reader_factory("#COUNT: 3\n#EXAMPLES: z:z\na:b\n")
        assert reader.parse() is False
        assert reader.errorcount() == 2
        assert reader.lasterror().message == "examples not found: z:z"


# ==============================================
# Bulk driver and handlers
# ==============================================

class TestParse:

    def test_link_handler(self, reader_factory):
        seen = []
        reader = reader_factory("a:1|one\na:2|two\n")
        assert reader.parse(link=seen.append) is True
        assert [link.label for link in seen] == ["one", "two"]

    def test_handlers_from_constructor(self, config):
        seen = []
        reader = BeaconReader("a:1\nbad\n", link=seen.append, error=seen.append, config=config)
        assert reader.parse() is False
        assert seen[0].id == "a:1"
        assert seen[1] == ("id must be URI", 2, "bad")

    def test_link_handler_that_raises(self, reader_factory):
        def explode(link):
            raise RuntimeError("boom")

        reader = reader_factory("a:1\na:2\n")
        assert reader.parse(link=explode) is False
        assert reader.errorcount() == 2
        assert str(reader.lasterror()).startswith("link handler died:")
        assert reader.lasterror_kind() == ErrorKind.HANDLER

    def test_error_handler_that_raises(self, reader_factory):
        def explode(record):
            raise RuntimeError("boom")

        reader = reader_factory("bad\n")
        assert reader.parse(error=explode) is False
        assert reader.errorcount() == 2
        assert reader.lasterror().message == "error handler died: boom"

    def test_non_callable_handler(self, reader_factory):
        reader = reader_factory("a:1\n")
        with pytest.raises(ArgumentError):
            reader.parse(link="not callable")
        with pytest.raises(ArgumentError):
            BeaconReader(error=42)

    def test_rebinding_starts_a_new_pass(self, reader_factory):
        reader = reader_factory("#NAME: first\nbad\na:1\n")
        assert reader.nextlink().id == "a:1"
        assert reader.errorcount() == 1

        assert reader.parse("#NAME: second\nb:1\nb:2\n") is True
        assert reader.meta("NAME") == "second"
        assert reader.count() == 2
        assert reader.line() == 3
        assert reader.errorcount() == 1

    def test_parse_after_done_returns_true(self, reader_factory):
        reader = reader_factory("a:1\n")
        assert reader.parse() is True
        assert reader.parse() is True

    def test_bad_header_fails_parse(self, reader_factory):
        reader = reader_factory("#FORMAT: FOO\na:b\n")
        assert reader.parse() is False
        assert reader.count() == 1
        assert reader.parse() is True

    def test_failed_open_fails_parse(self, tmp_path, config):
        reader = BeaconReader(str(tmp_path / "missing.txt"), config=config)
        assert reader.parse() is False

    def test_open_then_parse_counts_header_errors(self, config):
        reader = BeaconReader(config=config)
        assert reader.open("#COUNT: many\na:1\n") is True
        assert reader.parse() is False
        assert reader.errorcount() == 1

    def test_iteration(self, reader_factory):
        reader = reader_factory("a:1\na:2\na:3\n")
        assert [link.full_id for link in reader] == ["a:1", "a:2", "a:3"]


# ==============================================
# Meta accessors and serialization
# ==============================================

class TestMetaAccess:

    def test_set_raises_on_misuse(self, reader_factory):
        reader = reader_factory("a:1\n")
        with pytest.raises(ValidationError):
            reader.meta("PREFIX", "no uri")
        with pytest.raises(ArgumentError):
            reader.meta("NAME", "x", "FEED")
        assert reader.errorcount() == 0

    def test_count_uses_running_counter(self, reader_factory):
        reader = reader_factory("a:1\na:2\n")
        assert reader.count() == 0
        reader.nextlink()
        assert reader.count() == 1

    def test_count_prefers_declared(self, reader_factory):
        reader = reader_factory("#COUNT: 7\na:1\n")
        assert reader.count() == 7

    def test_metafields(self, reader_factory):
        reader = reader_factory("#PREFIX: x:\n#NAME: test\n#COUNT: 9\n1\n2\n")
        reader.parse()
        assert reader.metafields() == "#FORMAT: BEACON\n#NAME: test\n#PREFIX: x:\n#COUNT: 2\n"
        assert reader.metafields() == reader.metafields()

    def test_append_link(self, config):
        writer = BeaconReader(config=config)
        writer.meta("PREFIX", "http://example.org/")
        assert writer.append_link("1", "one", "", "x:1") == "1|one|x:1"
        assert writer.link().full_id == "http://example.org/1"
        assert writer.append_link("2") == "2"
        assert writer.count() == 2
        assert writer.metafields().endswith("#COUNT: 2\n")

    def test_append_link_rejects_bad_links(self, config):
        writer = BeaconReader(config=config)
        assert writer.append_link("") is None
        assert writer.append_link("nouri") is None
        assert writer.append_link("a:b", "", "", "bad target") is None
        assert writer.errorcount() == 3
        assert writer.count() == 0
