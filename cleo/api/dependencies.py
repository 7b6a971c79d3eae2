# This file provides dependency factories for FastAPI routes.
# Shared resources (database client, file store, mailer) are created once and cached.
# Services are cheap and built per request from those resources, so overriding the
# database or mailer in tests reaches every service.

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from cleo.api.api_config import ApiConfig, get_api_config
from cleo.api.db_access import DatabaseClient
from cleo.api.file_store import FileStore
from cleo.api.services.admin_service import AdminService
from cleo.api.services.ecf_service import ExtraContentFieldService
from cleo.api.services.email_service import EmailService
from cleo.api.services.file_service import FileService
from cleo.api.services.key_service import KeyService
from cleo.api.services.post_service import PostService
from cleo.api.services.token_service import TokenService
from cleo.api.services.user_service import UserService
from cleo.common.mailer import Mailer
from cleo.common.settings import get_settings


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    settings = get_settings()
    return DatabaseClient(database_url=settings.CLEO_DATABASE_URL)


@lru_cache(maxsize=1)
def get_file_store() -> FileStore:
    return FileStore()


@lru_cache(maxsize=1)
def get_mailer() -> Mailer:
    settings = get_settings()
    return Mailer(
        port=settings.CLEO_SMTP_PORT,
        use_tls=settings.CLEO_SMTP_USE_TLS,
        timeout_seconds=settings.CLEO_SMTP_TIMEOUT_SECONDS,
    )


def get_config() -> ApiConfig:
    return get_api_config()


DBDep = Annotated[DatabaseClient, Depends(get_database_client)]
FileStoreDep = Annotated[FileStore, Depends(get_file_store)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]


def get_admin_service(db: DBDep) -> AdminService:
    return AdminService(db=db)


def get_ecf_service(db: DBDep) -> ExtraContentFieldService:
    return ExtraContentFieldService(db=db)


def get_email_service(db: DBDep, mailer: MailerDep) -> EmailService:
    return EmailService(db=db, mailer=mailer)


def get_file_service(db: DBDep, file_store: FileStoreDep) -> FileService:
    return FileService(db=db, file_store=file_store)


def get_key_service(db: DBDep) -> KeyService:
    return KeyService(db=db)


def get_post_service(db: DBDep) -> PostService:
    return PostService(db=db)


def get_token_service(db: DBDep) -> TokenService:
    return TokenService(db=db)


def get_user_service(db: DBDep, file_store: FileStoreDep) -> UserService:
    return UserService(db=db, file_store=file_store)
