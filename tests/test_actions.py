"""Tests for file-level workflows and result objects."""

import pytest

from bmp_toolkit.core.actions import compare_files, inspect_file, negate_file
from bmp_toolkit.core.results import OperationResult


class TestCompareFiles:

    def test_equal(self, make_bmp, write_bmp):
        path = write_bmp("a.bmp", make_bmp(2, 2))
        result = compare_files(path, path)
        assert result.ok
        assert result.exit_code == 0
        assert result.metadata["verdict"] == "equal"
        assert result.metadata["coordinates"] == []

    def test_unequal(self, make_bmp, make_pixels, write_bmp):
        first = write_bmp("a.bmp", make_bmp(2, 2))
        second = write_bmp("b.bmp", make_bmp(2, 2, pixels=make_pixels([[(0, 0, 0)] * 2, [(0, 0, 0), (0, 0, 9)]])))
        seen = []

        result = compare_files(first, second, on_difference=lambda x, y: seen.append((x, y)))

        assert result.exit_code == 1
        assert result.metadata["verdict"] == "unequal"
        assert result.metadata["coordinates"] == [[1, 1]]
        assert seen == [(1, 1)]

    def test_bit_depth_mismatch_is_not_fatal(self, make_bmp, write_bmp):
        first = write_bmp("a.bmp", make_bmp(2, 2, bits=8))
        second = write_bmp("b.bmp", make_bmp(2, 2))
        result = compare_files(first, second)
        assert result.ok
        assert result.exit_code == 0
        assert result.metadata["verdict"] is None
        assert "different bits" in result.warnings[0]

    def test_invalid_file(self, make_bmp, write_bmp):
        first = write_bmp("a.bmp", make_bmp(2, 2, reserved=3))
        result = compare_files(first, first)
        assert not result.ok
        assert result.exit_code == -2
        assert "Reserved" in result.errors[0]

    def test_dimension_mismatch(self, make_bmp, write_bmp):
        result = compare_files(write_bmp("a.bmp", make_bmp(2, 2)), write_bmp("b.bmp", make_bmp(4, 2)))
        assert result.exit_code == -1
        assert "linear dimensions" in result.errors[0]

    def test_missing_file(self, tmp_path):
        result = compare_files(tmp_path / "x.bmp", tmp_path / "y.bmp")
        assert result.exit_code == -1


class TestNegateFile:

    def test_mine(self, make_bmp, write_bmp, tmp_path):
        src = write_bmp("a.bmp", make_bmp(3, 3, bits=8))
        dst = tmp_path / "out.bmp"
        result = negate_file(src, dst)
        assert result.ok
        assert result.bytes_len == src.stat().st_size
        assert dst.read_bytes()[:54] == src.read_bytes()[:54]

    def test_theirs_top_down(self, make_bmp, write_bmp, tmp_path):
        src = write_bmp("a.bmp", make_bmp(3, -3))
        result = negate_file(src, tmp_path / "out.bmp", mode="theirs")
        assert result.exit_code == -2
        assert not (tmp_path / "out.bmp").exists()

    def test_invalid_mode(self, tmp_path):
        with pytest.raises(ValueError):
            negate_file(tmp_path / "a.bmp", tmp_path / "b.bmp", mode="both")


class TestInspectFile:

    def test_reports_header(self, make_bmp, write_bmp):
        result = inspect_file(write_bmp("a.bmp", make_bmp(5, -2)))
        assert result.ok
        assert result.metadata["header"]["width"] == 5
        assert result.metadata["top_down"] is True
        assert result.metadata["row_padding"] == 1
        assert result.metadata["row_stride"] == 16

    def test_bad_magic(self, make_bmp, write_bmp):
        result = inspect_file(write_bmp("a.bmp", make_bmp(2, 2, magic=b"XX")))
        assert result.exit_code == -1
        assert "signature" in result.errors[0]


class TestOperationResult:

    def test_failure_summary(self):
        result = OperationResult.failure("negate", "Data writing error", exit_code=-1, files=["a.bmp"])
        summary = result.to_summary()
        assert "[FAILED] negate" in summary
        assert "Data writing error" in summary
        assert result.to_dict()["exit_code"] == -1

    def test_success_summary_lists_warnings(self):
        result = OperationResult.success("compare", files=["a.bmp", "b.bmp"])
        result.add_warning("Files have different bits. 8bit and 24bit")
        summary = result.to_summary()
        assert "[SUCCESS] compare" in summary
        assert "a.bmp, b.bmp" in summary
        assert "different bits" in summary
