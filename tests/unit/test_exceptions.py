"""Unit tests for custom exceptions."""

from embed_resolver import exceptions


def test_resolution_errors():
    err = exceptions.MalformedInputError("https://twitter.com/a/status/x")
    assert isinstance(err, exceptions.ResolutionError)
    assert err.url == "https://twitter.com/a/status/x"
    assert "expected pattern" in str(err)

    err = exceptions.UpstreamUnavailableError("https://api.imgur.com/3/album/x", 500, "boom")
    assert err.status_code == 500
    assert "Upstream error 500" in str(err)

    err = exceptions.UpstreamUnavailableError("https://example.com", None, "refused")
    assert err.status_code is None
    assert "Upstream unavailable: refused" in str(err)

    err = exceptions.UpstreamEmptyError("https://example.com")
    assert err.message == "No usable content"
    assert isinstance(err, exceptions.EmbedResolverError)


def test_provider_and_writer_errors():
    err = exceptions.ProviderNotConfiguredError("twitter")
    assert err.provider == "twitter"
    assert "not configured" in str(err)

    err = exceptions.WriterDisposedError("JsonResponseWriter")
    assert err.writer == "JsonResponseWriter"
    assert "disposed" in str(err)


def test_validation_errors():
    err = exceptions.InvalidURLError("not a url")
    assert err.url == "not a url"
    assert err.field == "url"
    assert "Invalid URL format" in str(err)

    err = exceptions.UnsupportedFormatError("yaml")
    assert err.format == "yaml"
    assert isinstance(err, exceptions.ValidationError)
    assert "yaml" in str(err)
