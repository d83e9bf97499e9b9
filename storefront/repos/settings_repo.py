# storefront/repos/settings_repo.py
from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.setting import SettingModel


class SettingsRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_many(self, keys: Iterable[str]) -> Dict[str, str | None]:
        rows = self.db.execute(
            select(SettingModel).where(SettingModel.key.in_(list(keys)))
        ).scalars().all()
        return {row.key: row.value for row in rows}

    def get(self, key: str) -> str | None:
        row = self.db.get(SettingModel, key)
        return row.value if row else None

    def upsert_many(self, values: Dict[str, str | None]) -> None:
        for key, value in values.items():
            row = self.db.get(SettingModel, key)
            if row:
                row.value = value
            else:
                self.db.add(SettingModel(key=key, value=value))
        self.db.commit()
