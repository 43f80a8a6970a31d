"""Tests for the classification API client."""

import io

import pytest
import requests

from hatewatch.client import ApiError, ClassificationApiClient, UploadRejectedError
from hatewatch.config import Settings


def _client(session, **kwargs):
    return ClassificationApiClient("http://api.test/", session=session, **kwargs)


def test_fetch_results_returns_rows(fake_session_factory, response_factory):
    rows = [{"Tweet": "hi", "Prediction": "non-offensive", "Score": "0.9"}]
    session = fake_session_factory(response_factory(payload={"success": True, "data": rows}))

    assert _client(session).fetch_results() == rows
    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["url"] == "http://api.test/api/results"
    assert session.calls[0]["timeout"] == 30.0


def test_unsuccessful_body_is_an_error(fake_session_factory, response_factory):
    session = fake_session_factory(response_factory(payload={"success": False, "data": []}))

    with pytest.raises(ApiError, match="unsuccessful"):
        _client(session).fetch_results()


def test_http_error_carries_status(fake_session_factory, response_factory):
    session = fake_session_factory(response_factory(status_code=503, payload={}, reason="Unavailable"))

    with pytest.raises(ApiError) as excinfo:
        _client(session).fetch_results()

    assert excinfo.value.status_code == 503


def test_transport_failure_is_wrapped(fake_session_factory):
    session = fake_session_factory(requests.ConnectionError("refused"))

    with pytest.raises(ApiError, match="refused"):
        _client(session).fetch_results()


def test_invalid_json_is_an_error(fake_session_factory, response_factory):
    session = fake_session_factory(response_factory(payload=ValueError("bad json")))

    with pytest.raises(ApiError, match="invalid JSON"):
        _client(session).fetch_results()


def test_analyze_posts_tweet_and_returns_first_prediction(fake_session_factory, response_factory):
    payload = {"analysis": [{"label": "hate", "score": "0.97"}]}
    session = fake_session_factory(response_factory(payload=payload))

    prediction = _client(session).analyze("some text")

    assert prediction == {"label": "hate", "score": "0.97"}
    assert session.calls[0]["json"] == {"tweet": "some text"}


def test_analyze_without_predictions_fails(fake_session_factory, response_factory):
    session = fake_session_factory(response_factory(payload={"analysis": []}))

    with pytest.raises(ApiError):
        _client(session).analyze("some text")


def test_upload_dataset_posts_multipart(fake_session_factory, tmp_path, response_factory):
    dataset = tmp_path / "tweets.csv"
    dataset.write_text("tweet\nhello\n", encoding="utf-8")
    session = fake_session_factory(response_factory(payload={"message": "ok"}))

    _client(session, upload_timeout=99).upload_dataset(dataset)

    call = session.calls[0]
    assert call["url"] == "http://api.test/api/upload-dataset"
    assert call["uploaded"] == ("tweets.csv", b"tweet\nhello\n", "text/csv")
    assert call["timeout"] == 99


def test_upload_rejects_non_csv_before_request(fake_session_factory, tmp_path):
    dataset = tmp_path / "tweets.txt"
    dataset.write_text("hello", encoding="utf-8")
    session = fake_session_factory()

    with pytest.raises(UploadRejectedError, match="CSV"):
        _client(session).upload_dataset(dataset)
    assert session.calls == []


def test_upload_rejects_oversized_file_object(fake_session_factory):
    session = fake_session_factory()
    handle = io.BytesIO(b"x" * 2048)

    with pytest.raises(UploadRejectedError, match="less than"):
        _client(session, max_upload_bytes=1024).upload_dataset(handle, filename="big.csv")
    assert session.calls == []


def test_upload_file_object_requires_name(fake_session_factory):
    with pytest.raises(UploadRejectedError):
        _client(fake_session_factory()).upload_dataset(io.BytesIO(b"a"))


def test_clear_results_sends_delete(fake_session_factory, response_factory):
    session = fake_session_factory(response_factory(payload=None))

    _client(session).clear_results()

    assert session.calls[0]["method"] == "DELETE"
    assert session.calls[0]["url"] == "http://api.test/api/results"


def test_from_settings_honours_online_mode(fake_session_factory):
    settings = Settings(online_mode=True, request_timeout=5)

    client = ClassificationApiClient.from_settings(settings, session=fake_session_factory())

    assert client.base_url == "https://backend-hatespeech.onrender.com"
    assert client.timeout == 5
