import io

import numpy as np
import pytest

from starseed_nn.data import DataFormatError, parse_lines, read_jsonl


def test_read_jsonl_skips_blank_lines(tmp_path):
    path = tmp_path / "train.jsonl"
    path.write_text(
        '{"x": [1.0, 2.0], "y": [0.5]}\n'
        "\n"
        "   \n"
        '{"x": [3, 4], "y": [-1]}\n'
    )
    samples = read_jsonl(path)
    assert len(samples) == 2
    assert samples[0].x.dtype == np.float32
    assert np.array_equal(samples[1].x, np.array([3.0, 4.0], dtype=np.float32))
    assert np.array_equal(samples[1].y, np.array([-1.0], dtype=np.float32))


def test_read_jsonl_from_stdin(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('{"x": [0.1], "y": [0.2]}\n'))
    samples = read_jsonl(None)
    assert len(samples) == 1
    assert samples[0].y[0] == np.float32(0.2)


def test_missing_file_raises_os_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_jsonl(tmp_path / "absent.jsonl")


@pytest.mark.parametrize(
    "line",
    [
        "{not json}",
        "[1, 2, 3]",
        '{"x": [1.0]}',
        '{"x": "1.0", "y": [1.0]}',
        '{"x": [1.0, "a"], "y": [1.0]}',
        '{"x": [true], "y": [1.0]}',
        '{"x": [1' + "0" * 400 + '], "y": [1.0]}',
        '{"x": [1.0], "y": null}',
    ],
)
def test_malformed_line_fails_whole_load(line):
    lines = ['{"x": [1.0], "y": [1.0]}', line, '{"x": [2.0], "y": [2.0]}']
    with pytest.raises(DataFormatError, match="line 2"):
        parse_lines(lines)


def test_inconsistent_dimensions_are_rejected():
    with pytest.raises(DataFormatError, match="features"):
        parse_lines(['{"x": [1.0, 2.0], "y": [1.0]}', '{"x": [1.0], "y": [1.0]}'])
    with pytest.raises(DataFormatError, match="targets"):
        parse_lines(['{"x": [1.0], "y": [1.0]}', '{"x": [1.0], "y": [1.0, 2.0]}'])


def test_targets_optional_for_inference_input():
    samples = parse_lines(['{"x": [1.0, 2.0]}'], require_targets=False)
    assert samples[0].y is None


def test_null_targets_treated_as_absent_for_inference_input():
    samples = parse_lines(
        ['{"x": [1.0, 2.0], "y": null}', '{"x": [3.0, 4.0]}'], require_targets=False
    )
    assert [s.y for s in samples] == [None, None]


def test_out_of_range_number_names_the_line():
    huge = "1" + "0" * 400
    with pytest.raises(DataFormatError, match="line 1: field 'x'"):
        parse_lines(['{"x": [%s], "y": [1.0]}' % huge])
