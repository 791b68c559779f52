"""
Data service
Per-user JSON storage with corruption backup, export and import
"""

import json
import shutil
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from dailyflow.config import get_config
from dailyflow.core.exceptions import StorageError, ValidationError
from dailyflow.core.models import USERNAME_PATTERN, AppData

logger = logging.getLogger(__name__)

USER_FILE_PREFIX = "user_"


class DataService:
    """Loads and saves one AppData container per user as data/user_<name>.json"""

    def __init__(self, data_dir: Union[str, Path] = "data", backup_dir: Union[str, Path] = "backups",
                 export_dir: Union[str, Path] = "exports"):
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir)
        self.export_dir = Path(export_dir)
        self.lock = threading.RLock()
        self._user_locks: Dict[str, threading.RLock] = {}

        for directory in (self.data_dir, self.backup_dir, self.export_dir):
            directory.mkdir(parents=True, exist_ok=True)

        logger.info("🔧 DataService ready in %s", self.data_dir)

    # ===== PATHS =====

    def _check_username(self, username: str) -> str:
        if not isinstance(username, str) or not USERNAME_PATTERN.match(username):
            raise ValidationError(f"Invalid username {username!r}")
        return username

    def user_file(self, username: str) -> Path:
        return self.data_dir / f"{USER_FILE_PREFIX}{self._check_username(username)}.json"

    def user_exists(self, username: str) -> bool:
        return self.user_file(username).exists()

    def list_users(self) -> List[str]:
        users = []
        for path in sorted(self.data_dir.glob(f"{USER_FILE_PREFIX}*.json")):
            username = path.stem[len(USER_FILE_PREFIX):]
            if USERNAME_PATTERN.match(username):
                users.append(username)
        return users

    # ===== LOAD / SAVE =====

    def load(self, username: str) -> AppData:
        """
        Load a user's state.

        A missing file yields an empty state. A file that is not valid JSON
        or does not describe a valid state is moved to the backup directory
        and an empty state is returned in its place.
        """
        path = self.user_file(username)

        with self.lock:
            if not path.exists():
                logger.debug("📂 No data for %s yet, starting empty", username)
                return AppData(username=username)

            try:
                with open(path, 'r', encoding='utf-8') as f:
                    raw = json.load(f)
            except json.JSONDecodeError as e:
                logger.error("❌ Corrupt JSON in %s: %s", path, e)
                return self._create_backup_and_reset(username, path)
            except OSError as e:
                raise StorageError(f"Cannot read {path}: {e}") from e

            try:
                return self._from_raw(username, raw)
            except ValidationError as e:
                logger.error("❌ Invalid data in %s: %s", path, e)
                return self._create_backup_and_reset(username, path)

    def save(self, data: AppData) -> Path:
        """Write atomically through a temporary file"""
        path = self.user_file(data.username)
        temp_file = path.with_suffix('.tmp')

        with self.lock:
            try:
                with open(temp_file, 'w', encoding='utf-8') as f:
                    json.dump(data.to_dict(), f, ensure_ascii=False, indent=2)
                temp_file.replace(path)
            except OSError as e:
                raise StorageError(f"Cannot write {path}: {e}") from e
            finally:
                if temp_file.exists():
                    temp_file.unlink()

        logger.debug("💾 Saved %s", path)
        return path

    @contextmanager
    def user_lock(self, username: str) -> Iterator[None]:
        """Serialise load-mutate-save cycles on one user's file"""
        self._check_username(username)
        with self.lock:
            lock = self._user_locks.setdefault(username, threading.RLock())
        with lock:
            yield

    @contextmanager
    def transaction(self, username: str) -> Iterator[AppData]:
        """
        Load a user's state, hand it to the caller and save it afterwards,
        holding the user's lock throughout.

        Nothing is saved when the block raises.
        """
        with self.user_lock(username):
            data = self.load(username)
            yield data
            self.save(data)

    def _from_raw(self, username: str, raw: Any) -> AppData:
        if not isinstance(raw, dict):
            raise ValidationError("top-level JSON value must be an object")
        return AppData.from_dict({**raw, "username": username})

    def _create_backup_and_reset(self, username: str, path: Path) -> AppData:
        """Move a broken file aside and start the user over with an empty state"""
        backup_path = self.backup_dir / f"{path.name}.corrupt-{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        try:
            path.replace(backup_path)
        except OSError as e:
            raise StorageError(f"Cannot back up corrupt file {path}: {e}") from e

        logger.warning("🔄 Corrupt file for %s moved to %s", username, backup_path)

        data = AppData(username=username)
        self.save(data)
        return data

    # ===== BACKUP / EXPORT / IMPORT =====

    def create_backup(self, username: str) -> Optional[Path]:
        path = self.user_file(username)
        if not path.exists():
            logger.warning("⚠️ No data file to back up for %s", username)
            return None

        backup_path = self.backup_dir / f"{path.stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        with self.lock:
            shutil.copy2(path, backup_path)

        logger.info("💾 Backup created: %s", backup_path)
        return backup_path

    def export_user(self, username: str, target: Optional[Union[str, Path]] = None) -> Path:
        """Write the user's state as JSON, by default to EXPORT_DIR/dailyflow-<name>-<date>.json"""
        data = self.load(username)

        if target is None:
            target = self.export_dir / f"dailyflow-{username}-{datetime.now().strftime('%Y-%m-%d')}.json"
        target = Path(target)

        payload = data.to_dict()
        payload["exportedAt"] = datetime.now().isoformat()

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise StorageError(f"Cannot write export {target}: {e}") from e

        logger.info("📤 Exported %s to %s", username, target)
        return target

    def import_user(self, username: str, source: Union[str, Path, Dict[str, Any]]) -> AppData:
        """
        Replace the user's state with an exported blob.

        The blob is validated before anything is written; the previous state
        is backed up first.
        """
        if isinstance(source, dict):
            raw = source
        else:
            try:
                with open(source, 'r', encoding='utf-8') as f:
                    raw = json.load(f)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Import file {source} is not valid JSON: {e}") from e
            except OSError as e:
                raise StorageError(f"Cannot read import file {source}: {e}") from e

        data = self._from_raw(self._check_username(username), raw)

        with self.user_lock(username):
            self.create_backup(username)
            self.save(data)

        logger.info(
            "📥 Imported %s: %d days, %d habits, %d goals, %d projects",
            username, len(data.calendar), len(data.habits), len(data.goals), len(data.projects)
        )
        return data


# Global instance
_data_service: Optional[DataService] = None

def get_data_service() -> DataService:
    """Global DataService, built from configuration on first use"""
    global _data_service
    if _data_service is None:
        storage = get_config().storage
        _data_service = DataService(storage.data_dir, storage.backup_dir, storage.export_dir)
    return _data_service

def initialize_data_service(data_dir: Union[str, Path], backup_dir: Union[str, Path],
                            export_dir: Union[str, Path]) -> DataService:
    global _data_service
    _data_service = DataService(data_dir, backup_dir, export_dir)
    return _data_service

def close_data_service() -> None:
    global _data_service
    _data_service = None
