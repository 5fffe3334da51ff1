from weatherline.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("WEATHERLINE_OSRM_BASE_URL", raising=False)

    config = Settings(_env_file=None)

    assert config.osrm_profile == "driving"
    assert config.forecast_padding_hours == 12.0
    assert config.short_link_hosts == ("maps.app.goo.gl", "goo.gl")
    assert config.default_timezone == "Europe/Rome"


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("WEATHERLINE_OSRM_BASE_URL", "http://localhost:5000/")
    monkeypatch.setenv("WEATHERLINE_FORECAST_PADDING_HOURS", "6")
    monkeypatch.setenv("WEATHERLINE_FRONTEND_ALLOWED_ORIGINS", '["https://weather.example.com"]')

    config = Settings(_env_file=None)

    assert config.osrm_base_url == "http://localhost:5000"
    assert config.forecast_padding_hours == 6.0
    assert config.frontend_allowed_origins == ("https://weather.example.com",)


def test_comma_separated_tuples():
    config = Settings(_env_file=None, short_link_hosts="maps.app.goo.gl, goo.gl ,links.example.com")

    assert config.short_link_hosts == ("maps.app.goo.gl", "goo.gl", "links.example.com")


def test_comma_separated_origins_from_environment(monkeypatch):
    monkeypatch.setenv("WEATHERLINE_FRONTEND_ALLOWED_ORIGINS", "https://a.example.com,https://b.example.com")

    config = Settings(_env_file=None)

    assert config.frontend_allowed_origins == ("https://a.example.com", "https://b.example.com")
