import pytest

from cors_gateway.cors.policy import (
    DEVELOPMENT_POLICY,
    ConfigurationError,
    CorsPolicy,
    production_policy,
    select_policy,
)

PROD_ORIGINS = ["https://yourdomain.com", "https://www.yourdomain.com"]


class TestDevelopmentPolicy:
    def test_allows_any_origin(self):
        headers = DEVELOPMENT_POLICY.response_headers("http://localhost:3000")

        assert headers["Access-Control-Allow-Origin"] == "*"
        assert "Vary" not in headers

    def test_headers_without_origin(self):
        """Requests without an Origin header still get the full header set."""
        headers = DEVELOPMENT_POLICY.response_headers(None)

        assert headers == {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With, Accept, Origin",
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Expose-Headers": "Content-Type, Authorization",
        }


class TestProductionPolicy:
    def test_allowed_origin_is_echoed(self):
        policy = production_policy(PROD_ORIGINS)

        headers = policy.response_headers("https://yourdomain.com")

        assert headers["Access-Control-Allow-Origin"] == "https://yourdomain.com"
        assert headers["Vary"] == "Origin"
        assert headers["Access-Control-Allow-Headers"] == (
            "Content-Type, Authorization, X-Requested-With"
        )
        assert headers["Access-Control-Allow-Credentials"] == "true"

    def test_unlisted_origin_gets_no_cors_headers(self):
        policy = production_policy(PROD_ORIGINS)

        headers = policy.response_headers("https://evil.example")

        assert headers == {"Vary": "Origin"}

    def test_missing_origin_gets_no_cors_headers(self):
        policy = production_policy(PROD_ORIGINS)

        assert "Access-Control-Allow-Origin" not in policy.response_headers(None)

    def test_trailing_slash_is_ignored_in_configuration(self):
        policy = production_policy(["https://app.example/"])

        assert policy.is_origin_allowed("https://app.example")

    def test_wildcard_rejected(self):
        with pytest.raises(ConfigurationError):
            production_policy(["*"])

    def test_max_age_emitted_when_set(self):
        policy = CorsPolicy(name="custom", allow_origins=("*",), max_age=600)

        assert policy.response_headers(None)["Access-Control-Max-Age"] == "600"


class TestSelectPolicy:
    def test_development(self):
        assert select_policy("development") is DEVELOPMENT_POLICY

    def test_case_insensitive(self):
        assert select_policy(" Development ") is DEVELOPMENT_POLICY

    def test_production(self):
        policy = select_policy("production", PROD_ORIGINS)

        assert policy.name == "ProductionCorsPolicy"
        assert policy.allow_origins == tuple(PROD_ORIGINS)
        assert not policy.allow_any_origin

    def test_production_without_origins_allows_nothing(self):
        policy = select_policy("production")

        assert not policy.is_origin_allowed("http://localhost:3000")

    @pytest.mark.parametrize("environment", ["", "staging", "dev"])
    def test_unknown_environment_rejected(self, environment):
        with pytest.raises(ConfigurationError):
            select_policy(environment)
