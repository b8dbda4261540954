import pytest

from work_record.files import (
    STATIC_UPLOAD_DIR,
    create_directory,
    sanitize_filename,
    write_binary_file,
)


def test_upload_dir_can_be_created(tmp_path):
    created = create_directory(tmp_path / STATIC_UPLOAD_DIR)
    assert created.is_dir()
    assert created.parts[-2:] == ("static", "upload")


def test_invalid_characters_replaced():
    assert sanitize_filename('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"


def test_valid_name_unchanged():
    assert sanitize_filename("report 2024.pdf") == "report 2024.pdf"


def test_no_invalid_characters_remain():
    result = sanitize_filename('<>:"/\\|?*' * 3)
    assert set(result) == {"_"}
    assert len(result) == 27


def test_ascii_truncated_to_limit():
    assert sanitize_filename("x" * 150) == "x" * 100


def test_multibyte_truncation_stays_valid():
    name = "文" * 50
    result = sanitize_filename(name)
    assert len(result.encode("utf-8")) <= 100
    assert name.startswith(result)
    assert len(result) == 100 // 3


def test_create_directory_nested(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    created = create_directory(target)
    assert created.is_dir()
    assert create_directory(target) == created


def test_create_directory_over_file_fails(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OSError):
        create_directory(blocker / "sub")


def test_write_binary_round_trip(tmp_path):
    target = tmp_path / "上传.bin"
    payload = bytes(range(256))
    write_binary_file(target, payload)
    assert target.read_bytes() == payload
    write_binary_file(target, b"new")
    assert target.read_bytes() == b"new"


def test_write_binary_missing_parent_fails(tmp_path):
    with pytest.raises(OSError):
        write_binary_file(tmp_path / "missing" / "f.bin", b"data")