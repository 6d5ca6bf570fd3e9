import os
import pytest
from tempfile import TemporaryDirectory

from replacer.parsing import (
    col_letters_to_index, col_index_to_letters, parse_column, parse_selector,
)
from replacer.errors import AppError, BAD_COLUMN, BAD_SELECTOR, FILE_NOT_FOUND


def _touch(path):
    with open(path, "wb") as f:
        f.write(b"")
    return path


def test_col_letters_to_index():
    assert col_letters_to_index("A") == 1
    assert col_letters_to_index("z") == 26
    assert col_letters_to_index("AA") == 27


def test_col_index_to_letters():
    assert col_index_to_letters(1) == "A"
    assert col_index_to_letters(28) == "AB"
    with pytest.raises(AppError):
        col_index_to_letters(0)


def test_parse_column_numbers_and_letters():
    assert parse_column("2") == 2
    assert parse_column(" 3 ") == 3
    assert parse_column("C") == 3
    assert parse_column(4) == 4


def test_parse_column_keeps_out_of_range_numbers():
    assert parse_column("0") == 0
    assert parse_column("-1") == -1


@pytest.mark.parametrize("bad", ["", "1.5", "A1", "?", True])
def test_parse_column_rejects_garbage(bad):
    with pytest.raises(AppError) as ei:
        parse_column(bad)
    assert ei.value.code == BAD_COLUMN


def test_parse_selector_resolves_absolute_path():
    with TemporaryDirectory() as td:
        path = _touch(os.path.join(td, "book.xlsx"))
        sel = parse_selector(f"{path},1,B")
        assert sel.file_path == os.path.abspath(path)
        assert sel.id_column == 1
        assert sel.value_column == 2


def test_parse_selector_path_may_contain_commas():
    with TemporaryDirectory() as td:
        path = _touch(os.path.join(td, "a,b.xlsx"))
        sel = parse_selector(f"{path},3,4")
        assert sel.file_path == os.path.abspath(path)
        assert (sel.id_column, sel.value_column) == (3, 4)


def test_parse_selector_ignores_extra_fields():
    with TemporaryDirectory() as td:
        path = _touch(os.path.join(td, "book.xlsx"))
        sel = parse_selector(f"{path},1,2,extra")
        assert (sel.id_column, sel.value_column) == (1, 2)


def test_parse_selector_too_few_fields():
    with pytest.raises(AppError) as ei:
        parse_selector("book.xlsx,1")
    assert ei.value.code == BAD_SELECTOR


def test_parse_selector_missing_file():
    with TemporaryDirectory() as td:
        with pytest.raises(AppError) as ei:
            parse_selector(f"{os.path.join(td, 'nope.xlsx')},1,2")
        assert ei.value.code == FILE_NOT_FOUND


def test_parse_selector_bad_column():
    with TemporaryDirectory() as td:
        path = _touch(os.path.join(td, "book.xlsx"))
        with pytest.raises(AppError) as ei:
            parse_selector(f"{path},1,x1")
        assert ei.value.code == BAD_COLUMN
