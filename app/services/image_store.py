"""
Хранилище изображений объявлений на локальном диске.

Файлы именуются как {listing_id}-{n}.{ext}. Номер n резервируется атомарно
(эксклюзивное создание файла), поэтому параллельные загрузки для одного
объявления не перезаписывают друг друга.
"""
import os
import re
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from app.config import get_settings
from app.exceptions import StorageFailure

logger = logging.getLogger(__name__)

SAFE_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
EXTENSION_RE = re.compile(r"[^a-z0-9]")
# Имена, которые выдает store: {listing_id}-{n}.{ext}
STORED_NAME_RE = re.compile(r"^(?P<listing_id>[A-Za-z0-9_-]+)-(?P<sequence>\d+)\.[a-z0-9]+$")
DEFAULT_EXTENSION = "bin"

CONTENT_TYPE_OVERRIDES = {
    "jpg": "image/jpeg",
    "svg": "image/svg+xml",
}


@dataclass
class StoredImage:
    content: bytes
    content_type: str
    filename: str


def content_type_for(filename: str) -> str:
    """Content-Type по расширению: image/{ext}, jpg -> jpeg"""
    ext = extension_of(filename)
    return CONTENT_TYPE_OVERRIDES.get(ext, f"image/{ext}")


def extension_of(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return DEFAULT_EXTENSION
    ext = EXTENSION_RE.sub("", filename.rsplit(".", 1)[1].lower())
    return ext or DEFAULT_EXTENSION


class ImageStore:
    """Файловое хранилище изображений с последовательной нумерацией по объявлению"""

    def __init__(self, upload_dir, placeholder_path):
        self.upload_dir = Path(upload_dir)
        self.placeholder_path = Path(placeholder_path)

    def _ensure_upload_dir(self):
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create upload directory {self.upload_dir}: {e}")
            raise StorageFailure("Failed to prepare image storage") from e

    def _count_existing(self, listing_id: str) -> int:
        prefix = f"{listing_id}-"
        return sum(1 for entry in os.scandir(self.upload_dir) if entry.name.startswith(prefix))

    def _reserve(self, listing_id: str, ext: str) -> Tuple[str, Path]:
        """
        Резервирует следующее свободное имя файла.
        Начинаем с count + 1; если имя уже занято (параллельная загрузка или
        удаленный ранее файл), берем следующий номер.
        """
        sequence = self._count_existing(listing_id) + 1
        while True:
            name = f"{listing_id}-{sequence}.{ext}"
            path = self.upload_dir / name
            try:
                fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                sequence += 1
                continue
            os.close(fd)
            return name, path

    def store(self, listing_id: str, content: bytes, original_name: Optional[str]) -> str:
        """
        Сохраняет изображение и возвращает ссылку на него (имя файла в каталоге загрузок).
        Содержимое пишется во временный файл и переносится на место через os.replace.
        """
        if not listing_id or not SAFE_NAME_RE.match(listing_id):
            raise StorageFailure(f"Invalid listing identifier: {listing_id!r}")

        self._ensure_upload_dir()
        ext = extension_of(original_name)

        try:
            name, path = self._reserve(listing_id, ext)
        except OSError as e:
            logger.error(f"Cannot reserve image name for listing {listing_id}: {e}")
            raise StorageFailure("Failed to store image") from e

        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(dir=self.upload_dir, prefix=".upload-", suffix=".tmp", delete=False) as tmp:
                tmp_path = tmp.name
                tmp.write(content)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Failed to write image {name}: {e}")
            for leftover in (tmp_path, path):
                if leftover and os.path.exists(leftover):
                    os.unlink(leftover)
            raise StorageFailure("Failed to store image") from e

        logger.info(f"Stored image {name} ({len(content)} bytes)")
        return name

    @staticmethod
    def _stored_name(reference: str) -> Optional[str]:
        # Принимаем как имя файла, так и путь вида /uploads/properties/<name>
        name = os.path.basename(reference.replace("\\", "/"))
        if not STORED_NAME_RE.match(name):
            return None
        return name

    def owns(self, listing_id: str, reference: Optional[str]) -> bool:
        """Ссылка указывает на файл, сохраненный для этого объявления"""
        if not reference:
            return False
        match = STORED_NAME_RE.match(os.path.basename(reference.replace("\\", "/")))
        return match is not None and match.group("listing_id") == listing_id

    def _resolve(self, reference: Optional[str]) -> Optional[Path]:
        """Путь к файлу внутри каталога загрузок или None для недопустимой ссылки"""
        if not reference:
            return None
        name = self._stored_name(reference)
        if name is None:
            return None
        return self.upload_dir / name

    def placeholder(self) -> StoredImage:
        try:
            content = self.placeholder_path.read_bytes()
        except OSError as e:
            logger.error(f"Placeholder image is unavailable at {self.placeholder_path}: {e}")
            raise StorageFailure("Placeholder image is unavailable") from e
        return StoredImage(content=content, content_type="image/jpeg", filename=self.placeholder_path.name)

    def retrieve(self, reference: Optional[str]) -> StoredImage:
        """Возвращает изображение; при отсутствии файла - заглушку вместо ошибки"""
        path = self._resolve(reference)
        if path is None:
            return self.placeholder()

        try:
            content = path.read_bytes()
        except OSError:
            logger.debug(f"Image {reference} not found, serving placeholder")
            return self.placeholder()
        if not content:
            # Слот зарезервирован, но содержимое еще не перенесено
            return self.placeholder()

        return StoredImage(content=content, content_type=content_type_for(path.name), filename=path.name)

    def delete(self, reference: str) -> bool:
        path = self._resolve(reference)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete image {reference}: {e}")
            raise StorageFailure("Failed to delete image") from e
        return True


def get_image_store() -> ImageStore:
    settings = get_settings()
    return ImageStore(settings.upload_dir, settings.placeholder_image)
