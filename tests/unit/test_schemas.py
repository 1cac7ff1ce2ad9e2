"""Unit tests for form validation and record building (app/pipeline/schemas.py)."""

from datetime import date, datetime

from app.pipeline.schemas import (
    ARTIST_SCHEMA,
    REEL_SCHEMA,
    build_record,
    parse_date,
    validate_exhibition_dates,
    validate_form,
)
from app.pipeline.submission import SubmissionForm
from conftest import TODAY, blob


def artist_form(**overrides):
    values = {
        "artistName": "Nina Vale",
        "artistBio": "Painter.",
        "exhibitionName": "Night Shift",
        "exhibitionStartDate": "2024-02-01",
        "exhibitionEndDate": "2024-03-01",
    }
    values.update(overrides)
    return SubmissionForm(values=values)


def test_valid_artist_form_has_no_errors():
    assert validate_form(ARTIST_SCHEMA, artist_form(), TODAY) == {}


def test_required_fields_are_reported():
    errors = validate_form(ARTIST_SCHEMA, artist_form(artistName="  ", exhibitionName=None), TODAY)
    assert errors["artistName"] == "Artist name is required"
    assert errors["exhibitionName"] == "Exhibition name is required"


def test_bio_length_limit():
    errors = validate_form(ARTIST_SCHEMA, artist_form(artistBio="b" * 2501), TODAY)
    assert errors == {"artistBio": "Must be at most 2500 characters"}


def test_profile_urls_must_be_http():
    errors = validate_form(ARTIST_SCHEMA, artist_form(twitterProfile="twitter.com/nina"), TODAY)
    assert errors == {"twitterProfile": "Please enter a valid URL (http:// or https://)"}


def test_start_in_the_past_rejected_only_for_new_records():
    values = {"exhibitionStartDate": "2023-12-31", "exhibitionEndDate": "2024-02-01"}
    assert "exhibitionStartDate" in validate_exhibition_dates(values, True, TODAY)
    assert validate_exhibition_dates(values, False, TODAY) == {}


def test_end_must_be_after_start():
    values = {"exhibitionStartDate": "2024-02-01", "exhibitionEndDate": "2024-01-15"}
    errors = validate_exhibition_dates(values, True, TODAY)
    assert errors == {"exhibitionEndDate": "End date must be after start date"}


def test_invalid_date_string():
    values = {"exhibitionStartDate": "next friday", "exhibitionEndDate": "2024-02-01"}
    errors = validate_exhibition_dates(values, True, TODAY)
    assert errors["exhibitionStartDate"] == "Please enter a valid date"


def test_too_many_exemplary_works():
    form = artist_form()
    form.secondary_files = [blob(f"w{i}.jpg") for i in range(6)]
    errors = validate_form(ARTIST_SCHEMA, form, TODAY)
    assert errors == {"exemplaryWorks": "You can upload up to 5 files"}


def test_non_image_photo_rejected():
    form = artist_form()
    form.primary_file = blob("cv.pdf", content_type="application/pdf")
    errors = validate_form(ARTIST_SCHEMA, form, TODAY)
    assert errors == {"artistPhoto": "Please select a valid image file"}


def test_reel_video_accepted_by_extension_when_mime_is_generic():
    form = SubmissionForm(
        values={"reelName": "Teaser"},
        primary_file=blob("clip.MOV", content_type="application/octet-stream"),
    )
    assert validate_form(REEL_SCHEMA, form, TODAY) == {}


def test_parse_date_variants():
    assert parse_date("2024-02-01") == date(2024, 2, 1)
    assert parse_date("2024-02-01T10:00:00Z") == date(2024, 2, 1)
    assert parse_date(datetime(2024, 2, 1, 9, 30)) == date(2024, 2, 1)
    assert parse_date("") is None
    assert parse_date("31/01/2024") is None


def test_build_record_normalizes_values():
    record = build_record(ARTIST_SCHEMA, {
        "artistName": "  Nina  ",
        "facebookProfile": "",
        "exhibitionStartDate": "2024-02-01T00:00:00",
    })
    assert record["artistName"] == "Nina"
    assert record["facebookProfile"] is None
    assert record["exhibitionStartDate"] == "2024-02-01"
    assert record["exhibitionEndDate"] is None
    assert "artistPhotoURL" not in record
