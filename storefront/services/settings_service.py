# storefront/services/settings_service.py
from typing import Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from storefront.domain.errors import UnknownSettingError
from storefront.domain.store_settings import StoreSettings, ContentSettings, KNOWN_KEYS
from storefront.repos.settings_repo import SettingsRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

S = TypeVar("S", bound=BaseModel)


class SettingsService:
    """
    Ustawienia sklepu: tabela key -> string czytana jednym zapytaniem
    do typowanego modelu z wartosciami domyslnymi.
    """

    def __init__(self, db: Session):
        self.repo = SettingsRepo(db)

    def _load(self, schema: Type[S]) -> S:
        stored = self.repo.get_many(schema.model_fields)
        values = {}
        for key, raw in stored.items():
            if raw is None or not raw.strip():
                continue
            try:
                # walidacja pojedynczego pola, zeby jeden zly wpis nie zerowal reszty
                schema.model_validate({key: raw})
            except ValidationError:
                logger.warning(f"Setting {key}={raw!r} is not valid, using default")
                continue
            values[key] = raw
        return schema.model_validate(values)

    def load_store_settings(self) -> StoreSettings:
        return self._load(StoreSettings)

    def load_content(self) -> ContentSettings:
        return self._load(ContentSettings)

    def get_all(self) -> Dict[str, str | None]:
        return self.repo.get_many(KNOWN_KEYS)

    def update(self, values: Dict[str, str | None]) -> Dict[str, str | None]:
        unknown = sorted(set(values) - KNOWN_KEYS)
        if unknown:
            raise UnknownSettingError(f"Unknown setting keys: {', '.join(unknown)}")

        self.repo.upsert_many({k: (None if v is None else str(v)) for k, v in values.items()})
        logger.info(f"Settings updated: {sorted(values)}")
        return self.get_all()
