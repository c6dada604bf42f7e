import io

import pytest
from werkzeug.datastructures import FileStorage

from catalog.validation import Validator

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def upload(data=PNG, filename="cover.png"):
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type="image/png")


def test_empty_string_fails_only_notempty():
    v = Validator({"title": ""}, {"title": "required|notempty"})
    assert v.fails()
    assert v.errors() == {"title": ["The title field must not be empty."]}


def test_missing_value_fails_required():
    v = Validator({}, {"title": "required|notempty"})
    assert list(v.errors()) == ["title"]
    assert v.first_errors()["title"] == "The title field is required."


def test_messages_accumulate_in_rule_order():
    v = Validator({"description": "   "}, {"description": "required|notempty|min:10"})
    assert v.errors()["description"] == [
        "The description field must not be empty.",
        "The description field must be at least 10 characters.",
    ]
    assert v.first_errors() == {"description": "The description field must not be empty."}


def test_passing_data():
    v = Validator(
        {"title": "Emma", "genre_id": "3", "platform_ids": ["1", "2"], "release_date": "1815-12-23"},
        {
            "title": "required|notempty|max:255",
            "genre_id": "required|integer",
            "platform_ids": "required|array|min:1|max:10",
            "release_date": "required|date",
        },
    )
    assert v.passes()
    assert v.errors() == {}


@pytest.mark.parametrize("value,rule,ok", [
    ("abc", "max:3", True),
    ("abcd", "max:3", False),
    (["a"], "min:1", True),
    ([], "min:1", False),
    (list(range(11)), "max:10", False),
    (7, "min:5", True),
    (4, "min:5", False),
    ("12", "integer", True),
    ("-4", "integer", True),
    ("1.5", "integer", False),
    (True, "integer", False),
    ("2.5", "numeric", True),
    ("x", "numeric", False),
    ("2024-02-30", "date", False),
    ("2024-02-28", "date", True),
    ("1,2", "array", False),
])
def test_single_rules(value, rule, ok):
    assert Validator({"f": value}, {"f": "required|" + rule}).passes() is ok


def test_optional_blank_field_skips_rules():
    v = Validator({"nickname": "", "image": None}, {"nickname": "min:3", "image": "file|image"})
    assert v.passes()


def test_optional_empty_upload_skips_file_rules():
    empty = FileStorage(stream=io.BytesIO(b""), filename="")
    assert Validator({"image": empty}, {"image": "file|image|mimes:png"}).passes()


def test_required_file_missing_does_not_raise():
    v = Validator({"image": None}, {"image": "required|file|image|mimes:jpg,png|max_file_size:100"})
    errors = v.errors()["image"]
    assert errors[0] == "The image field is required."
    assert len(errors) == 5


def test_non_upload_value_fails_file_rule():
    v = Validator({"image": "cover.png"}, {"image": "required|file"})
    assert v.first_errors()["image"] == "The image field must be an uploaded file."


def test_image_rules_accept_png():
    v = Validator({"image": upload()}, {"image": "required|file|image|mimes:jpg,jpeg,png|max_file_size:5242880"})
    assert v.passes()


def test_image_rule_rejects_non_image_bytes():
    v = Validator({"image": upload(b"just text", "notes.png")}, {"image": "required|image"})
    assert v.first_errors()["image"] == "The image field must be an image."


def test_mimes_checks_extension():
    v = Validator({"image": upload(filename="cover.gif")}, {"image": "required|mimes:jpg,png"})
    assert v.first_errors()["image"] == "The image field must be a file of type: jpg, png."


def test_max_file_size():
    big = upload(PNG + b"\x00" * (10 * 1024 * 1024))
    v = Validator({"image": big}, {"image": "required|file|image|max_file_size:5242880"})
    assert v.errors()["image"] == ["The image field must not be larger than 5242880 bytes."]


def test_size_check_leaves_stream_position():
    file = upload()
    file.stream.seek(3)
    Validator({"image": file}, {"image": "required|image|max_file_size:1000"}).errors()
    assert file.stream.tell() == 3


def test_unknown_rule_is_a_programming_error():
    with pytest.raises(ValueError, match="Unknown validation rule"):
        Validator({"f": "x"}, {"f": "required|shiny"}).errors()
