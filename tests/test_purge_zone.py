"""
Tests for zone-aware cache purge (EdgeOne).

Covers:
- Zone resolution by main domain
- Quota-driven planning: chunked URL purges vs. host invalidation
- Malformed URL short-circuit
- Per-task failure isolation
"""

import asyncio

import pytest

from edgesync.cloud.api_client import CloudApiError
from edgesync.core.retry import RetryPolicy
from edgesync.purge.dispatcher import (
    BatchPurgeStrategy,
    ZoneNotFoundError,
    ZonePurgeStrategy,
    create_dispatcher,
)
from edgesync.purge.tasks import (
    PurgeKind,
    PurgeMethod,
    Quota,
    Zone,
    find_zone,
    group_by_main_domain,
    is_valid_url,
    main_domain,
    plan_zone_tasks,
)

from fakes import FakeCdnClient, FakeEdgeOneClient, RecordingSleep


def _urls(n, host="www.example.com"):
    return [f"https://{host}/p/{i}.html" for i in range(n)]


def _strategy(client):
    return ZonePurgeStrategy(client, RetryPolicy(), sleep=RecordingSleep())


class TestDomainHelpers:

    def test_main_domain_is_last_two_labels(self):
        assert main_domain("a.b.example.com") == "example.com"
        assert main_domain("WWW.Example.COM") == "example.com"
        assert main_domain("localhost") == "localhost"

    def test_grouping_preserves_order(self):
        urls = [
            "https://www.example.com/a",
            "https://blog.other.org/b",
            "https://static.example.com/c",
        ]
        groups = group_by_main_domain(urls)

        assert list(groups) == ["example.com", "other.org"]
        assert groups["example.com"] == ["https://www.example.com/a", "https://static.example.com/c"]

    def test_find_zone_exact_and_parent(self):
        zones = [Zone("other.org", "zone-o"), Zone("example.com", "zone-e")]

        assert find_zone(zones, "example.com").zone_id == "zone-e"
        assert find_zone(zones, "cdn.example.com").zone_id == "zone-e"
        assert find_zone(zones, "notexample.com") is None

    @pytest.mark.parametrize("url,valid", [
        ("https://www.example.com/a.html", True),
        ("http://example.com/", True),
        ("not a url", False),
        ("ftp://example.com/file", False),
        ("https:///no-host", False),
        ("", False),
    ])
    def test_is_valid_url(self, url, valid):
        assert is_valid_url(url) is valid


class TestPlanZoneTasks:

    def test_generous_plan_chunks_by_batch_limit(self):
        """batchLimit 1000 with 2500 URLs: three URL purges of 1000/1000/500."""
        tasks = plan_zone_tasks(_urls(2500), Quota(batch_limit=1000, daily_limit=10000, daily_available=10000))

        assert [len(t.targets) for t in tasks] == [1000, 1000, 500]
        assert all(t.kind == PurgeKind.URL_PURGE for t in tasks)
        assert all(t.method == PurgeMethod.DELETE for t in tasks)

    def test_generous_plan_never_falls_back(self):
        tasks = plan_zone_tasks(_urls(300), Quota(batch_limit=1000, daily_limit=10000, daily_available=100))

        assert [t.kind for t in tasks] == [PurgeKind.URL_PURGE]

    def test_constrained_plan_over_quota_falls_back_to_hosts(self):
        """dailyAvailable 100 with 300 pending URLs: one host invalidation."""
        urls = _urls(150, "www.example.com") + _urls(150, "static.example.com")

        tasks = plan_zone_tasks(urls, Quota(batch_limit=100, daily_limit=1000, daily_available=100))

        assert len(tasks) == 1
        assert tasks[0].kind == PurgeKind.HOST_INVALIDATE
        assert tasks[0].method == PurgeMethod.INVALIDATE
        assert tasks[0].targets == ("www.example.com", "static.example.com")

    def test_constrained_plan_within_quota_purges_urls(self):
        tasks = plan_zone_tasks(_urls(250), Quota(batch_limit=100, daily_limit=1000, daily_available=900))

        assert [len(t.targets) for t in tasks] == [100, 100, 50]
        assert all(t.kind == PurgeKind.URL_PURGE for t in tasks)

    def test_pending_equal_to_available_is_not_fallback(self):
        tasks = plan_zone_tasks(_urls(100), Quota(batch_limit=500, daily_limit=1000, daily_available=100))

        assert tasks[0].kind == PurgeKind.URL_PURGE

    def test_empty(self):
        assert plan_zone_tasks([], Quota(100, 100, 0)) == []


class TestZonePurgeStrategy:

    def test_host_fallback_submitted(self, capsys):
        client = FakeEdgeOneClient(
            zones=[Zone("example.com", "zone-1")],
            quotas={"zone-1": Quota(batch_limit=100, daily_limit=1000, daily_available=100)},
        )

        report = asyncio.run(_strategy(client).invalidate(_urls(300)))

        assert len(client.tasks) == 1
        task = client.tasks[0]
        assert task.zone_id == "zone-1"
        assert task.kind == PurgeKind.HOST_INVALIDATE
        assert task.targets == ("www.example.com",)
        assert task.method == PurgeMethod.INVALIDATE
        assert report.submitted == 1
        assert report.refreshed == 300
        assert "only 100 left today" in capsys.readouterr().out

    def test_url_purge_chunks_submitted(self):
        client = FakeEdgeOneClient(
            zones=[Zone("example.com", "zone-1")],
            quotas={"zone-1": Quota(batch_limit=1000, daily_limit=10000, daily_available=10000)},
        )

        report = asyncio.run(_strategy(client).invalidate(_urls(2500)))

        assert [len(t.targets) for t in client.tasks] == [1000, 1000, 500]
        assert all(t.kind == PurgeKind.URL_PURGE for t in client.tasks)
        assert report.submitted == 3
        assert report.urls == 2500

    def test_malformed_url_skips_everything(self, capsys):
        client = FakeEdgeOneClient(zones=[Zone("example.com", "zone-1")], quotas={})

        report = asyncio.run(_strategy(client).invalidate(["https://www.example.com/a", "not a url"]))

        assert report.skipped
        assert client.list_zone_calls == 0
        assert client.quota_calls == []
        assert client.attempts == 0
        assert "malformed URL 'not a url'" in capsys.readouterr().out

    def test_missing_zone_raises(self):
        client = FakeEdgeOneClient(zones=[Zone("other.org", "zone-o")], quotas={})

        with pytest.raises(ZoneNotFoundError) as exc_info:
            asyncio.run(_strategy(client).invalidate(_urls(3)))

        assert exc_info.value.main_domain == "example.com"
        assert client.attempts == 0

    def test_each_main_domain_uses_its_own_zone_and_quota(self):
        client = FakeEdgeOneClient(
            zones=[Zone("example.com", "zone-e"), Zone("other.org", "zone-o")],
            quotas={
                "zone-e": Quota(1000, 10000, 10000),
                "zone-o": Quota(100, 1000, 1),
            },
        )
        urls = _urls(2, "www.example.com") + _urls(5, "blog.other.org")

        asyncio.run(_strategy(client).invalidate(urls))

        assert client.list_zone_calls == 1
        assert client.quota_calls == ["zone-e", "zone-o"]
        by_zone = {t.zone_id: t for t in client.tasks}
        assert by_zone["zone-e"].kind == PurgeKind.URL_PURGE
        assert len(by_zone["zone-e"].targets) == 2
        assert by_zone["zone-o"].kind == PurgeKind.HOST_INVALIDATE
        assert by_zone["zone-o"].targets == ("blog.other.org",)

    def test_failed_task_is_isolated(self, capsys):
        client = FakeEdgeOneClient(
            zones=[Zone("example.com", "zone-1")],
            quotas={"zone-1": Quota(batch_limit=1000, daily_limit=10000, daily_available=10000)},
        )
        client.failing_tasks = {0}

        report = asyncio.run(_strategy(client).invalidate(_urls(1500)))

        # First task tried 4 times and given up on, second still submitted
        assert client.attempts == 5
        assert [len(t.targets) for t in client.tasks] == [500]
        assert report.failed == 1
        assert report.submitted == 1
        assert report.refreshed == 500
        assert "purge_url failed" in capsys.readouterr().out

    def test_quota_failure_propagates(self):
        client = FakeEdgeOneClient(zones=[Zone("example.com", "zone-1")], quotas={})
        client.quota_error = CloudApiError("UnauthorizedOperation", "no permission")

        with pytest.raises(CloudApiError):
            asyncio.run(_strategy(client).invalidate(_urls(3)))

        assert client.attempts == 0

    def test_no_urls(self):
        client = FakeEdgeOneClient(zones=[], quotas={})

        report = asyncio.run(_strategy(client).invalidate([]))

        assert client.list_zone_calls == 0
        assert report.submitted == 0


class TestCreateDispatcher:

    def test_cdn(self):
        assert isinstance(create_dispatcher("cdn", FakeCdnClient()), BatchPurgeStrategy)

    def test_edgeone(self):
        client = FakeEdgeOneClient(zones=[], quotas={})
        assert isinstance(create_dispatcher("edgeone", client), ZonePurgeStrategy)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_dispatcher("cloudfront", FakeCdnClient())
