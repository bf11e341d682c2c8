"""Tests for health check inputs"""

from components.health_alarms import FAILURE_THRESHOLD, REQUEST_INTERVAL_SECONDS, health_check_args
from tests.conftest import SEARCH_STRING


class TestHealthCheckArgs:
    def test_main_www_matches_content_over_https(self, signals):
        args = health_check_args(signals[1], measure_latency=True)
        assert args["fqdn"] == "www.example.com"
        assert args["type"] == "HTTPS_STR_MATCH"
        assert args["port"] == 443
        assert args["enable_sni"] is True
        assert args["search_string"] == SEARCH_STRING
        assert args["measure_latency"] is True

    def test_redirect_status_only_over_http(self, signals):
        args = health_check_args(signals[2], measure_latency=False)
        assert args["fqdn"] == "example.net"
        assert args["type"] == "HTTP"
        assert args["port"] == 80
        assert "search_string" not in args
        assert args["measure_latency"] is False

    def test_common_settings(self, signals):
        for signal in signals:
            args = health_check_args(signal, measure_latency=False)
            assert args["resource_path"] == "/"
            assert args["request_interval"] == REQUEST_INTERVAL_SECONDS
            assert args["failure_threshold"] == FAILURE_THRESHOLD
