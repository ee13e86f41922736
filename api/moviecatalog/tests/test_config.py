from __future__ import annotations

from moviecatalog.core.config import DEFAULT_CORS_ORIGINS, Settings


def test_list_settings_accept_csv_and_json():
    configured = Settings(
        cors_origins="https://a.example, https://b.example",
        health_allowlist='["10.0.0.0/8", "monitor.internal"]',
    )

    assert configured.cors_origins == ["https://a.example", "https://b.example"]
    assert configured.health_allowlist == ["10.0.0.0/8", "monitor.internal"]


def test_blank_list_settings_fall_back():
    configured = Settings(cors_origins="", health_allowlist="")

    assert configured.cors_origins == DEFAULT_CORS_ORIGINS
    assert configured.health_allowlist == []


def test_image_base_url_gets_trailing_slash():
    configured = Settings(tmdb_image_base_url="https://cdn.example/t/p")

    assert configured.tmdb_image_base_url == "https://cdn.example/t/p/"
    assert configured.tmdb_poster_size == "w500"
    assert configured.tmdb_backdrop_size == "w1280"
