import pytest

from revenue_pacing.config.settings import get_settings
from revenue_pacing.models.entities import TargetConfiguration
from revenue_pacing.services.container import (
    ServiceContainer,
    ServiceCreationError,
    ServiceNotFoundError,
    get_container,
    reset_container,
)
from revenue_pacing.services.dashboard_service import DashboardService
from revenue_pacing.services.factory import (
    CORE_SERVICES,
    get_service_health_report,
    initialize_services,
)
from revenue_pacing.services.revenue_file_service import RevenueFileService


class TestServiceContainer:
    """Test the ServiceContainer class."""

    def setup_method(self):
        self.container = ServiceContainer()

    def test_register_and_get_singleton(self):
        """Singletons are built once and reused."""
        self.container.register_singleton("test_service", lambda: object())
        assert self.container.get("test_service") is self.container.get("test_service")

    def test_register_and_get_factory(self):
        """Factories build a new instance on every get."""
        call_count = 0

        def mock_factory():
            nonlocal call_count
            call_count += 1
            return f"mock_service_{call_count}"

        self.container.register_factory("test_service", mock_factory)
        assert self.container.get("test_service") == "mock_service_1"
        assert self.container.get("test_service") == "mock_service_2"

    def test_register_instance(self):
        instance = object()
        self.container.register_instance("thing", instance)
        assert self.container.get("thing") is instance

    def test_service_not_found(self):
        with pytest.raises(ServiceNotFoundError):
            self.container.get("nonexistent_service")

    def test_factory_failure_wrapped(self):
        def broken():
            raise RuntimeError("boom")

        self.container.register_singleton("broken", broken)
        with pytest.raises(ServiceCreationError, match="boom"):
            self.container.get("broken")

    def test_config_management(self):
        self.container.set_config({"key1": "value1", "key2": 42})

        assert self.container.get_config("key1") == "value1"
        assert self.container.get_config("key2") == 42
        assert self.container.get_config("missing_key") is None
        assert self.container.get_config("missing_key", "default") == "default"

    def test_clear_singletons_rebuilds(self):
        self.container.register_singleton("test_service", lambda: object())
        first = self.container.get("test_service")
        self.container.clear_singletons()
        assert self.container.get("test_service") is not first

    def test_list_services(self):
        self.container.register_singleton("a", lambda: 1)
        self.container.register_factory("b", lambda: 2)
        self.container.register_instance("c", 3)
        assert self.container.list_services() == {
            "a": "singleton_factory",
            "b": "factory",
            "c": "singleton_instance",
        }


class TestGlobalContainer:
    def test_get_container_is_shared(self):
        assert get_container() is get_container()

    def test_reset_container(self):
        first = get_container()
        reset_container()
        assert get_container() is not first


class TestServiceFactory:
    def test_initialize_services(self):
        initialize_services(get_settings("testing"))
        container = get_container()

        for name in CORE_SERVICES:
            assert container.has_service(name)
        assert container.get_config("ENVIRONMENT") == "test"
        assert isinstance(container.get("default_targets"), TargetConfiguration)
        assert isinstance(container.get("dashboard_service"), DashboardService)
        assert isinstance(container.get("revenue_file_service"), RevenueFileService)

    def test_dashboard_service_uses_settings_targets(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_AUSTIN_DAILY_TARGET", "1234")
        initialize_services(get_settings("testing"))
        service = get_container().get("dashboard_service")
        assert service.default_targets.daily_targets.austin == 1234.0

    def test_health_report_healthy(self):
        initialize_services(get_settings("testing"))
        report = get_service_health_report()
        assert report["overall_status"] == "healthy"
        assert report["issues"] == []
        assert report["environment"] == "test"

    def test_health_report_unregistered(self):
        report = get_service_health_report()
        assert report["overall_status"] == "unhealthy"
        assert len(report["issues"]) == len(CORE_SERVICES)

    def test_health_report_degraded(self):
        initialize_services(get_settings("testing"))

        def broken():
            raise RuntimeError("no targets")

        get_container().register_singleton("revenue_file_service", broken)
        report = get_service_health_report()
        assert report["overall_status"] == "degraded"
        assert report["services"]["revenue_file_service"]["error"] is not None
