from pathlib import Path

import pytest

from roicoder.libs.lut import InvalidLUTError, load_lut


def _planes() -> bytes:
    reds = bytes(range(256))
    greens = bytes(255 - index for index in range(256))
    blues = bytes(256)
    return reds + greens + blues


def test_load_raw_binary_lut(tmp_path: Path):
    path = tmp_path / "ramp.lut"
    path.write_bytes(_planes())

    lut = load_lut(path)

    assert lut.name == "ramp"
    assert len(lut) == 256
    assert lut.colors[0] == (0, 255, 0)
    assert lut.colors[-1] == (255, 0, 0)


def test_load_nih_lut_with_header(tmp_path: Path):
    path = tmp_path / "nih.lut"
    path.write_bytes(b"ICOL" + bytes(28) + _planes())

    lut = load_lut(path, name="NIH ramp")

    assert lut.name == "NIH ramp"
    assert len(lut) == 256
    assert lut.colors[10] == (10, 245, 0)


def test_load_text_table_with_header_and_index_column(tmp_path: Path):
    path = tmp_path / "bwr.txt"
    path.write_text(
        "# exported palette\n"
        "Index\tRed\tGreen\tBlue\n"
        "0\t0\t0\t255\n"
        "\n"
        "1\t255\t255\t255  # midpoint\n"
        "2,255,0,0\n",
        encoding="utf-8",
    )

    lut = load_lut(path)

    assert lut.colors == ((0, 0, 255), (255, 255, 255), (255, 0, 0))


def test_load_text_table_with_three_columns(tmp_path: Path):
    path = tmp_path / "two.csv"
    path.write_text("10, 20, 30\n40, 50, 60\n", encoding="utf-8")

    assert load_lut(path).colors == ((10, 20, 30), (40, 50, 60))


@pytest.mark.parametrize(
    "content",
    [
        b"",
        b"0 0 0\n",
        b"0 0 0\n1 2\n",
        b"0 0 0\n300 0 0\n",
        b"0 0 0\nred green blue\n",
        b"\xff\xfe\x00\x81",
    ],
)
def test_malformed_files_raise(tmp_path: Path, content: bytes):
    path = tmp_path / "broken.lut"
    path.write_bytes(content)

    with pytest.raises(InvalidLUTError):
        load_lut(path)


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(InvalidLUTError):
        load_lut(tmp_path / "absent.lut")
