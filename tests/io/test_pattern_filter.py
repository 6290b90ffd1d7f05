"""Tests for glob-based output selection."""

import pytest

from bundle_size.core.exceptions import PatternError
from bundle_size.core.models import OutputFile
from bundle_size.io.pattern_filter import PatternFilter, compile_glob, expand_braces


class TestExpandBraces:
    """Test brace expansion."""

    def test_alternation(self):
        """Test comma alternatives."""
        assert expand_braces("*.{js,css}") == ["*.js", "*.css"]

    def test_nested(self):
        """Test nested alternatives."""
        assert expand_braces("{a,b{1,2}}.js") == ["a.js", "b1.js", "b2.js"]

    def test_multiple_groups(self):
        """Test several groups multiply out."""
        assert expand_braces("{a,b}.{js,css}") == ["a.js", "a.css", "b.js", "b.css"]

    def test_numeric_range(self):
        """Test numeric ranges."""
        assert expand_braces("chunk-{1..3}.js") == ["chunk-1.js", "chunk-2.js", "chunk-3.js"]

    def test_literal_braces(self):
        """Test braces without alternatives stay literal."""
        assert expand_braces("{a}.js") == ["{a}.js"]
        assert expand_braces("{a,b.js") == ["{a,b.js"]


class TestCompileGlob:
    """Test glob translation."""

    @pytest.mark.parametrize("pattern,name,expected", [
        ("*.js", "a.js", True),
        ("*.js", "dir/a.js", False),
        ("**/*.js", "a.js", True),
        ("**/*.js", "dir/sub/a.js", True),
        ("dist/**", "dist", True),
        ("dist/**", "dist/a/b.js", True),
        ("dist/**", "distro/a.js", False),
        ("**", "any/thing.txt", True),
        ("a?.js", "ab.js", True),
        ("a?.js", "a/.js", False),
        ("[ab].js", "a.js", True),
        ("[!ab].js", "a.js", False),
        ("[!ab].js", "c.js", True),
        ("*.JS", "a.js", False),
        ("assets/*.css", "assets/main.css", True),
        ("assets/*.css", "other/main.css", False),
        ("**/*.{mjs,js,jsx,css,html}", "index.html", True),
        ("**/*.{mjs,js,jsx,css,html}", "img/logo.png", False),
        ("main.abcd123.js", "main.abcd123.js", True),
        ("main.abcd123.js", "mainXabcd123.js", False),
    ])
    def test_matching(self, pattern, name, expected):
        """Test separator-aware, case-sensitive matching."""
        assert bool(compile_glob(pattern).match(name)) is expected

    def test_empty_pattern(self):
        """Test an empty pattern is rejected."""
        with pytest.raises(PatternError):
            compile_glob("")

    def test_invalid_pattern(self):
        """Test an invalid character range is rejected."""
        with pytest.raises(PatternError, match="Invalid glob"):
            compile_glob("[z-a].js")


class TestPatternFilter:
    """Test PatternFilter."""

    def test_include_and_exclude(self):
        """Test the documented include/exclude example."""
        pattern_filter = PatternFilter("**/*.{js,css}", "**/*.map.js")

        retained = pattern_filter.filter(["a.js", "a.map.js", "a.css", "a.png"])

        assert retained == ["a.js", "a.css"]

    def test_no_exclude(self):
        """Test nothing is excluded without an exclude pattern."""
        pattern_filter = PatternFilter("**/*.js")
        assert pattern_filter.filter(["a.js", "b.map.js"]) == ["a.js", "b.map.js"]

    def test_invalid_exclude_raises(self):
        """Test the exclude glob is validated too."""
        with pytest.raises(PatternError):
            PatternFilter("**/*.js", "[z-a]")

    def test_select_single_chunk_override(self):
        """Test a single-chunk build tracks exactly that chunk."""
        pattern_filter = PatternFilter("**/*.css")
        files = {
            "main.abcd123.js": OutputFile(name="main.abcd123.js", code=b"x"),
            "logo.svg": OutputFile(name="logo.svg", code=b"<svg/>", is_chunk=False),
        }

        assert pattern_filter.select(files) == ["main.abcd123.js"]

    def test_select_single_chunk_respects_exclude(self):
        """Test the exclude glob still applies to the single chunk."""
        pattern_filter = PatternFilter("**/*.css", "main.*")
        files = {"main.abcd123.js": OutputFile(name="main.abcd123.js", code=b"x")}

        assert pattern_filter.select(files) == []

    def test_select_multiple_chunks_uses_pattern(self):
        """Test code-split builds use the configured pattern."""
        pattern_filter = PatternFilter("**/*.{js,css}")
        files = {
            "main.js": OutputFile(name="main.js", code=b"x"),
            "chunk-1.js": OutputFile(name="chunk-1.js", code=b"x"),
            "style.css": OutputFile(name="style.css", code=b"x", is_chunk=False),
            "logo.png": OutputFile(name="logo.png", code=b"x", is_chunk=False),
        }

        assert pattern_filter.select(files) == ["main.js", "chunk-1.js", "style.css"]

    def test_select_single_chunk_keeps_matching_assets(self):
        """Test a single chunk is added to, not substituted for, the matches."""
        pattern_filter = PatternFilter("**/*.{css,html}")
        files = {
            "main.abc.js": OutputFile(name="main.abc.js", code=b"x"),
            "style.abc.css": OutputFile(name="style.abc.css", code=b"x", is_chunk=False),
            "index.html": OutputFile(name="index.html", code=b"x", is_chunk=False),
            "logo.png": OutputFile(name="logo.png", code=b"x", is_chunk=False),
        }

        assert pattern_filter.select(files) == ["main.abc.js", "style.abc.css", "index.html"]
