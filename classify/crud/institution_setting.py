from sqlalchemy.orm import Session

from classify.crud.base import CRUDBase
from classify.models.institution_setting import InstitutionSetting
from classify.schemas.institution_setting import InstitutionSettingUpdate

class CRUDInstitutionSetting(CRUDBase[InstitutionSetting, InstitutionSettingUpdate, InstitutionSettingUpdate]):

    def get_or_create(self, db: Session) -> InstitutionSetting:
        """Return the single settings row, creating it with defaults on first use."""
        db_obj = db.query(InstitutionSetting).order_by(InstitutionSetting.id).first()
        if db_obj:
            return db_obj
        db_obj = InstitutionSetting()
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

institution_setting = CRUDInstitutionSetting(InstitutionSetting)
