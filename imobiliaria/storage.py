"""
Armazenamento de arquivos - Imobiliária API
===========================================

Interface de blob (``put(path, content, content_type) -> url``) sobre o
``default_storage`` do Django e o pool limitado de uploads.
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 3
DEFAULT_TIMEOUT_SECONDS = 30


class StorageError(Exception):
    pass


class BlobStorage:
    """
    Blob store sobre um storage do Django (local em dev/testes, S3 etc. em produção)
    """

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def put(self, path, content, content_type=""):
        if isinstance(content, (bytes, bytearray)):
            content = ContentFile(bytes(content))
        if content_type:
            content.content_type = content_type
        try:
            name = self.storage.save(path, content)
        except OSError as exc:
            raise StorageError(f"Falha ao gravar {path}: {exc}") from exc
        return self.storage.url(name)

    def delete(self, path):
        if self.storage.exists(path):
            self.storage.delete(path)


@dataclass
class UploadItem:
    """Arquivo enviado num campo multipart, com o tipo de documento correspondente"""

    field: str
    file: object
    document_type: str

    @property
    def name(self):
        return getattr(self.file, "name", "") or "arquivo"

    @property
    def content_type(self):
        return getattr(self.file, "content_type", "") or "application/octet-stream"


@dataclass
class UploadResult:
    item: UploadItem
    url: str


def blob_path(folder, filename):
    """Caminho único dentro da pasta: ``<folder>/<uuid>-<nome>``"""
    return f"{folder.strip('/')}/{uuid.uuid4().hex}-{get_valid_filename(filename)}"


def discard_late_upload(storage, path, future):
    """
    Remove o blob de um upload que terminou depois do timeout (o futuro em
    execução não pode ser cancelado)
    """
    if future.cancelled() or future.exception() is not None:
        return
    try:
        storage.delete(path)
    except Exception:
        logger.warning(f"Não foi possível remover o upload atrasado {path}", exc_info=True)
    else:
        logger.info(f"Upload atrasado removido: {path}")


def upload_files(items, folder, storage=None, max_workers=None, timeout=None):
    """
    Envia os arquivos em paralelo (pool limitado) com timeout por arquivo.

    Um arquivo que falha ou estoura o tempo é registrado no log e ignorado;
    os demais continuam. Devolve os ``UploadResult`` bem-sucedidos na ordem
    de entrada. Um upload que termina depois do timeout tem o blob removido.
    """
    items = list(items)
    if not items:
        return []

    storage = storage or BlobStorage()
    max_workers = max_workers or getattr(settings, "UPLOAD_MAX_WORKERS", DEFAULT_MAX_WORKERS)
    timeout = timeout or getattr(settings, "UPLOAD_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)

    def put(item, path):
        return storage.put(path, item.file.read(), item.content_type)

    results = []
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="upload")
    try:
        futures = []
        for item in items:
            path = blob_path(folder, item.name)
            futures.append((item, path, executor.submit(put, item, path)))
        for item, path, future in futures:
            try:
                url = future.result(timeout=timeout)
            except FutureTimeoutError:
                if not future.cancel():
                    future.add_done_callback(lambda done, path=path: discard_late_upload(storage, path, done))
                logger.warning(f"Upload de {item.name} ({item.field}) excedeu {timeout}s e foi ignorado")
                continue
            except Exception as exc:
                logger.warning(f"Upload de {item.name} ({item.field}) falhou: {exc}", exc_info=True)
                continue
            results.append(UploadResult(item, url))
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info(f"Uploads concluídos em {folder}: {len(results)}/{len(items)}")
    return results
