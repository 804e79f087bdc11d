import io

import pytest
from werkzeug.datastructures import FileStorage

from src.visitor_system.visitor_system.core.exceptions import ValidationError
from src.visitor_system.visitor_system.uploads.storage import INVALID_UPLOAD_MESSAGE, LocalImageStorage


def _file(name: str, data: bytes = b"img") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=name)


def test_save_uses_generated_name_and_keeps_extension(tmp_path):
    storage = LocalImageStorage(tmp_path)

    name = storage.save(_file("../../Passport Photo.JPG"))

    assert name.endswith(".jpg")
    assert "Passport" not in name
    assert (tmp_path / name).read_bytes() == b"img"


def test_subfolder_is_part_of_returned_name(tmp_path):
    name = LocalImageStorage(tmp_path, subfolder="employees").save(_file("a.png"))

    assert name.startswith("employees/")
    assert (tmp_path / name).exists()


@pytest.mark.parametrize("filename", ["फोटो.jpg", "ảnh chân dung.PNG", "照片.webp"])
def test_save_accepts_non_latin_filenames(tmp_path, filename):
    name = LocalImageStorage(tmp_path).save(_file(filename))

    assert name.endswith(filename.rsplit(".", 1)[1].lower())
    assert (tmp_path / name).read_bytes() == b"img"


@pytest.mark.parametrize("filename", ["notes.txt", "noext", "", "photo.jpg.exe", "../../etc/passwd"])
def test_save_rejects_non_images(tmp_path, filename):
    with pytest.raises(ValidationError):
        LocalImageStorage(tmp_path).save(_file(filename))


def test_save_optional_skips_missing_file(tmp_path):
    assert LocalImageStorage(tmp_path).save_optional(None) is None


def test_upload_route(make_client, tmp_path):
    client = make_client()

    ok = client.post(
        "/api/upload",
        data={"image": (io.BytesIO(b"img"), "photo.webp")},
        content_type="multipart/form-data",
    )
    bad = client.post("/api/upload", data={}, content_type="multipart/form-data")

    assert ok.status_code == 200
    assert (tmp_path / ok.get_json()["filename"]).exists()
    assert bad.status_code == 400
    assert bad.get_json()["message"] == INVALID_UPLOAD_MESSAGE


def test_stored_keeps_file_when_write_succeeds(tmp_path):
    storage = LocalImageStorage(tmp_path, subfolder="employees")

    with storage.stored(_file("a.png")) as name:
        pass

    assert (tmp_path / name).exists()


def test_stored_removes_file_when_write_fails(tmp_path):
    storage = LocalImageStorage(tmp_path, subfolder="employees")

    with pytest.raises(ValidationError):
        with storage.stored(_file("a.png")) as name:
            assert (tmp_path / name).exists()
            raise ValidationError("Mật khẩu xác nhận không khớp")

    assert not (tmp_path / name).exists()


def test_stored_without_file_yields_none(tmp_path):
    with LocalImageStorage(tmp_path).stored(None) as name:
        assert name is None


def test_discard_ignores_missing_file(tmp_path):
    LocalImageStorage(tmp_path).discard("123-456.png")
    LocalImageStorage(tmp_path).discard(None)


def test_upload_route_accepts_non_latin_filename(make_client, uploaded_files):
    resp = make_client().post(
        "/api/upload",
        data={"image": (io.BytesIO(b"img"), "फोटो.jpg")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert resp.get_json()["filename"].endswith(".jpg")
    assert uploaded_files() == [resp.get_json()["filename"]]
