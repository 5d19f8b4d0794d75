"""Unit tests for pull request body composition."""

from bundle_update_pr.body import FOOTER, HEADER, Note, compose_body

LINKS = [
    "* [rails](https://github.com/rails/rails): [`7.1.2...7.1.3`](https://github.com/rails/rails/compare/v7.1.2...v7.1.3)",
    "* [puma](https://github.com/puma/puma): [`6.4.0...6.4.2`](https://github.com/puma/puma/compare/v6.4.0...v6.4.2)",
]


class TestComposeBody:
    """Test body layout."""

    def test_links_and_footer(self):
        body = compose_body(LINKS)

        assert body == f"{HEADER}\n\n{LINKS[0]}\n{LINKS[1]}\n\n{FOOTER}\n"
        assert "---" not in body

    def test_keeps_link_order(self):
        body = compose_body(list(reversed(LINKS)))

        assert body.index("puma") < body.index("rails")

    def test_note_section(self):
        body = compose_body(LINKS, "Please check the CHANGELOGs.")

        assert body.endswith(f"{FOOTER}\n\n---\n\nPlease check the CHANGELOGs.\n")

    def test_note_without_trailing_newline_still_ends_body_with_one(self):
        body = compose_body([], "note without newline")

        assert body.endswith("---\n\nnote without newline\n")

    def test_note_kept_verbatim(self):
        body = compose_body(LINKS, "## Checklist\n- [ ] run tests\n")

        assert body.endswith("---\n\n## Checklist\n- [ ] run tests\n\n")

    def test_empty_links_still_has_footer(self):
        assert compose_body([]) == f"{HEADER}\n\n\n\n{FOOTER}\n"


class TestNote:
    """Test the optional note file."""

    def test_missing(self, tmp_path):
        note = Note(tmp_path / "BUNDLE_UPDATE_NOTE.md")

        assert note.exists() is False
        assert note.read_if_exists() is None

    def test_present(self, tmp_path):
        path = tmp_path / "BUNDLE_UPDATE_NOTE.md"
        path.write_text("## Checklist\n- [ ] run tests\n", encoding="utf-8")

        note = Note(path)

        assert note.exists() is True
        assert note.read_if_exists() == "## Checklist\n- [ ] run tests\n"

    def test_directory_is_not_a_note(self, tmp_path):
        assert Note(tmp_path).exists() is False
