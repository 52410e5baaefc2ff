"""FastAPI dependencies - thin accessors over the DI container."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from repo_health.api.container import get_container
from repo_health.application.report.use_case import ReportBuilder
from repo_health.domain.ports.config import AppConfig

limiter = Limiter(key_func=get_remote_address)


def get_config() -> AppConfig:
    """Config loaded once by the container."""
    return get_container().config


def get_report_builder() -> ReportBuilder:
    return get_container().report_builder
