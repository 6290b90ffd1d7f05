"""Tests for AssetMeasurer."""

from unittest.mock import MagicMock

import pytest

from bundle_size.core.models import OutputFile
from bundle_size.io.asset_measurer import AssetMeasurer
from bundle_size.io.compression import GzipCompression, NoCompression
from bundle_size.io.pattern_filter import PatternFilter


class TestAssetMeasurer:
    """Test measuring outputs."""

    @pytest.mark.asyncio
    async def test_measure_in_memory_outputs(self, make_outputs):
        """Test every output is measured by default."""
        measurer = AssetMeasurer(NoCompression())

        sizes = await measurer.measure_outputs(make_outputs({"a.js": b"12345", "b.css": "ab"}))

        assert sizes == {"a.js": 5, "b.css": 2}

    @pytest.mark.asyncio
    async def test_measure_selected_names(self, make_outputs):
        """Test only the given names are measured, in order."""
        measurer = AssetMeasurer(NoCompression())
        outputs = make_outputs({"a.js": b"1", "b.js": b"22", "c.js": b"333"})

        sizes = await measurer.measure_outputs(outputs, ["c.js", "a.js"])

        assert list(sizes) == ["c.js", "a.js"]
        assert sizes == {"c.js": 3, "a.js": 1}

    @pytest.mark.asyncio
    async def test_sourcemap_comment_on_chunks_only(self, make_outputs):
        """Test the sourceMappingURL line is only added to chunks."""
        measurer = AssetMeasurer(NoCompression(), sourcemap_comment=True)
        outputs = make_outputs({"js/main.js": b"x", "style.css": b"x"})

        sizes = await measurer.measure_outputs(outputs)

        assert sizes["js/main.js"] == 1 + len("\n//# sourceMappingURL=main.js.map")
        assert sizes["style.css"] == 1

    @pytest.mark.asyncio
    async def test_path_backed_output(self, tmp_path):
        """Test outputs on disk are streamed through the strategy."""
        path = tmp_path / "main.js"
        path.write_bytes(b"console.log('hi');\n" * 100)
        strategy = GzipCompression()

        sizes = await AssetMeasurer(strategy).measure_outputs(
            {"main.js": OutputFile(name="main.js", path=path)})

        assert sizes == {"main.js": strategy.measure(path.read_bytes())}

    @pytest.mark.asyncio
    async def test_unreadable_output_is_skipped(self, tmp_path, make_outputs):
        """Test a missing file does not fail its siblings."""
        outputs = make_outputs({"a.js": b"abc"})
        outputs["gone.js"] = OutputFile(name="gone.js", path=tmp_path / "gone.js")

        sizes = await AssetMeasurer(NoCompression()).measure_outputs(outputs)

        assert sizes == {"a.js": 3}

    @pytest.mark.asyncio
    async def test_encoding_error_is_skipped(self, make_outputs):
        """Test an output whose code cannot be encoded does not fail its siblings."""
        outputs = make_outputs({"a.js": "ok", "b.js": "bad\ud800"})

        sizes = await AssetMeasurer(NoCompression()).measure_outputs(outputs)

        assert sizes == {"a.js": 2}

    @pytest.mark.asyncio
    async def test_compressor_error_is_skipped(self, make_outputs):
        """Test a strategy failure on one output is isolated."""
        strategy = MagicMock()
        strategy.measure.side_effect = [RuntimeError("compressor failed"), 7]
        outputs = make_outputs({"a.js": b"a", "b.js": b"b"})

        sizes = await AssetMeasurer(strategy).measure_outputs(outputs, ["a.js"])
        assert sizes == {}
        sizes = await AssetMeasurer(strategy).measure_outputs(outputs, ["b.js"])
        assert sizes == {"b.js": 7}


class TestMeasureDirectory:
    """Test cold-start measurement of a previous output directory."""

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path):
        """Test a missing or unset directory gives an empty baseline."""
        measurer = AssetMeasurer(NoCompression())
        pattern_filter = PatternFilter("**/*.js")

        assert await measurer.measure_directory(None, pattern_filter) == {}
        assert await measurer.measure_directory(tmp_path / "nope", pattern_filter) == {}

    @pytest.mark.asyncio
    async def test_filters_and_measures(self, tmp_path):
        """Test nested files are named relative to the directory and filtered."""
        (tmp_path / "js").mkdir()
        (tmp_path / "js" / "app.js").write_bytes(b"abcd")
        (tmp_path / "js" / "app.map.js").write_bytes(b"abcdef")
        (tmp_path / "logo.png").write_bytes(b"png")

        sizes = await AssetMeasurer(NoCompression()).measure_directory(
            tmp_path, PatternFilter("**/*.js", "**/*.map.js"))

        assert sizes == {"js/app.js": 4}

    @pytest.mark.asyncio
    async def test_single_chunk_outside_pattern(self, tmp_path):
        """Test a lone chunk is measured even when the pattern misses it."""
        (tmp_path / "bundle.cjs").write_bytes(b"x" * 100)
        (tmp_path / "notes.txt").write_bytes(b"n")

        sizes = await AssetMeasurer(NoCompression()).measure_directory(
            tmp_path, PatternFilter("**/*.{js,css}"))

        assert sizes == {"bundle.cjs": 100}
