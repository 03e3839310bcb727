"""
Unit tests for the metric extractor.
"""
import pytest

from speedaudit.models.audit import LargestResource, NetworkEvent, PageMetrics, ResourceType
from speedaudit.services.metrics import extract_metrics, find_largest_resource, is_third_party


class TestExtractMetrics:
    """Test extract_metrics against a typical event set."""

    @pytest.fixture
    def metrics(self, sample_events) -> PageMetrics:
        return extract_metrics("https://example.com/", sample_events, 2.75, has_unoptimized_forms=True)

    def test_counts(self, metrics):
        assert metrics.total_requests == 8
        assert metrics.image_count == 2
        assert metrics.script_count == 3
        assert metrics.stylesheet_count == 1

    def test_third_party_scripts(self, metrics):
        assert metrics.third_party_script_count == 2

    def test_total_bytes_treats_missing_size_as_zero(self, metrics):
        assert metrics.total_bytes == 30_000 + 12_000 + 250_000 + 90_000 + 250_000 + 4_000

    def test_largest_resource_first_observed_wins_tie(self, metrics):
        # app.js and hero.jpg are both 250KB; the script was observed first
        assert metrics.largest_resource == LargestResource(ResourceType.SCRIPT, 250_000)

    def test_passthrough_fields(self, metrics):
        assert metrics.url == "https://example.com/"
        assert metrics.load_time_seconds == 2.75
        assert metrics.has_unoptimized_forms is True

    def test_deterministic(self, sample_events):
        first = extract_metrics("https://example.com/", sample_events, 1.0)
        second = extract_metrics("https://example.com/", sample_events, 1.0)

        assert first == second


class TestEdgeCases:
    """Empty and unusual inputs."""

    def test_no_events(self):
        metrics = extract_metrics("https://example.com", [], 0.5)

        assert metrics.total_requests == 0
        assert metrics.total_bytes == 0
        assert metrics.largest_resource is None
        assert metrics.largest_resource_display == "N/A"

    def test_unsized_events_are_counted_but_not_largest(self):
        events = [
            NetworkEvent(url="https://example.com/a.png", resource_type=ResourceType.IMAGE),
            NetworkEvent(url="https://example.com/b.png", resource_type=ResourceType.IMAGE),
        ]

        metrics = extract_metrics("https://example.com", events, 1.0)

        assert metrics.total_requests == 2
        assert metrics.image_count == 2
        assert metrics.largest_resource is None

    def test_zero_byte_resource_can_be_largest(self):
        events = [NetworkEvent(url="https://example.com/empty.js", resource_type=ResourceType.SCRIPT, byte_size=0)]

        assert find_largest_resource(events) == LargestResource(ResourceType.SCRIPT, 0)

    def test_malformed_script_url_is_same_host(self):
        events = [
            NetworkEvent(url="http://[::1", resource_type=ResourceType.SCRIPT),
            NetworkEvent(url="not a url", resource_type=ResourceType.SCRIPT),
        ]

        metrics = extract_metrics("https://example.com", events, 1.0)

        assert metrics.script_count == 2
        assert metrics.third_party_script_count == 0

    def test_subdomain_counts_as_third_party(self):
        assert is_third_party("https://cdn.example.com/x.js", "example.com") is True
        assert is_third_party("https://example.com/x.js", "example.com") is False

    def test_largest_resource_display(self):
        events = [NetworkEvent(url="https://example.com/hero.jpg", resource_type=ResourceType.IMAGE, byte_size=2_516_582)]

        metrics = extract_metrics("https://example.com", events, 1.0)

        assert metrics.largest_resource_display == "2.4MB"


class TestHostComparison:
    """Host matching ignores case and default ports."""

    @pytest.mark.parametrize("page_url", [
        "https://Example.com",
        "https://EXAMPLE.COM/pricing",
        "https://example.com:443/",
        "http://example.com:80",
    ])
    def test_first_party_script_variants(self, page_url):
        events = [NetworkEvent(url="https://example.com/app.js", resource_type=ResourceType.SCRIPT)]

        metrics = extract_metrics(page_url, events, 1.0)

        assert metrics.third_party_script_count == 0

    def test_non_default_port_is_a_different_host(self):
        events = [NetworkEvent(url="https://example.com:8443/app.js", resource_type=ResourceType.SCRIPT)]

        metrics = extract_metrics("https://example.com", events, 1.0)

        assert metrics.third_party_script_count == 1

    def test_page_host_case_ignored(self):
        assert is_third_party("https://example.com/x.js", "Example.com") is False
