from __future__ import annotations

import logging
from typing import Optional

import requests

from media_bridge.core.api import WordPressClient
from media_bridge.core.database import SettingsDatabase
from media_bridge.core.file_size_probe import FileSizeProbe
from media_bridge.core.http_client import HttpClient, create_http_client_from_settings
from media_bridge.core.media_factory import MediaItemFactory
from media_bridge.core.media_provider import MediaProvider
from media_bridge.core.settings import SourceSettings, load_settings

logger = logging.getLogger(__name__)


class CoreContext:
    """
    Shared Core dependencies (settings + clients + provider).

    Use a single instance for app lifetime for consistency and performance.
    """

    def __init__(
        self,
        *,
        db: Optional[SettingsDatabase] = None,
        settings: Optional[SourceSettings] = None,
        session: Optional[requests.Session] = None,
        strict_mime: bool = False,
    ):
        self.db = db
        if settings is None:
            if self.db is None:
                self.db = SettingsDatabase()
            # Connect early so settings can be read
            if self.db.conn is None:
                self.db.connect()
            settings = load_settings(self.db)
        self.settings = settings

        self._http_client: HttpClient = create_http_client_from_settings(self.settings)
        self.session = session if session is not None else self._http_client.sync_session

        self._wordpress = WordPressClient(
            self.settings.base_url,
            session=self.session,
            auth_token=self.settings.auth_token,
            auth_scheme=self.settings.auth_scheme,
            timeout=self.settings.list_timeout,
            upload_timeout=self.settings.upload_timeout,
        )

        self.probe = FileSizeProbe(
            session=self.session,
            async_session_factory=self._http_client.create_async_session,
            timeout=self.settings.probe_timeout,
            max_concurrency=self.settings.probe_concurrency,
        )
        self.factory = MediaItemFactory(probe=self.probe, size_names=self.settings.size_names)
        self.media = MediaProvider(
            self._wordpress,
            self.factory,
            strict_mime=strict_mime,
            default_per_page=self.settings.per_page_default,
        )
        logger.info(f"Core context ready for {self.settings.base_url}")

    @property
    def client(self) -> WordPressClient:
        return self._wordpress

    def close(self) -> None:
        self._http_client.close()
        self.session.close()
        if self.db is not None:
            self.db.close()
