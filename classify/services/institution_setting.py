from sqlalchemy.orm import Session

from classify.crud.institution_setting import institution_setting as crud_setting
from classify.schemas.institution_setting import InstitutionSettingUpdate


class InstitutionSettingService:

    def get_settings(self, db: Session):
        return crud_setting.get_or_create(db)

    def update_settings(self, db: Session, settings_in: InstitutionSettingUpdate):
        db_obj = crud_setting.get_or_create(db)
        return crud_setting.update(db, db_obj=db_obj, obj_in=settings_in)


institution_setting_service = InstitutionSettingService()
