from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .clients.collection_client import CollectionClient
from .config import ConsoleConfig
from .domains import DOMAINS
from .engine.console import CollectionConsole
from .engine.domain import DomainSpec
from .engine.exports import DirectorySink
from .engine.runner import InlineRunner, TaskRunner
from .http_client import HttpClient
from .telemetry import TelemetryLogger
from .ui.notification_center import NotificationCenter


@dataclass
class ConsoleBootstrap:
    """Builds one independent console per admin domain over a shared transport."""

    config: ConsoleConfig
    access_token: str | None = None
    runner: TaskRunner = field(default_factory=InlineRunner)
    http: HttpClient | None = None
    telemetry: TelemetryLogger | None = None
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    consoles: dict[str, CollectionConsole] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        self.http = self.http or HttpClient(config=self.config)
        self.telemetry = self.telemetry or TelemetryLogger(enabled=self.config.telemetry_enabled)

    def client(self, domain: DomainSpec) -> CollectionClient:
        assert self.http is not None
        return CollectionClient(
            http=self.http,
            access_token=self.access_token,
            domain=domain,
            default_page_size=self.config.page_size,
        )

    def console(self, name: str) -> CollectionConsole:
        if name not in self.consoles:
            domain = DOMAINS[name]
            self.consoles[name] = CollectionConsole(
                domain,
                self.client(domain),
                self.runner,
                page_size=self.config.page_size,
                sink=DirectorySink(Path(self.config.export_dir)),
                telemetry=self.telemetry,
                notifications=self.notifications,
            )
        return self.consoles[name]

    def build_all(self) -> dict[str, CollectionConsole]:
        for name in DOMAINS:
            self.console(name)
        return dict(self.consoles)
