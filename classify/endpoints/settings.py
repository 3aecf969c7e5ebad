from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from classify.core.constants import RoleEnum
from classify.schemas.institution_setting import InstitutionSetting, InstitutionSettingUpdate
from classify.schemas.response import APIResponse
from classify.schemas.user import UserContext
from classify.services.institution_setting import institution_setting_service
from classify.utils import deps

router = APIRouter()

require_admin = deps.require_roles(RoleEnum.ADMIN)


@router.get("", response_model=APIResponse[InstitutionSetting])
async def get_settings(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(require_admin),
):
    settings_row = institution_setting_service.get_settings(db)
    return APIResponse(message="Settings retrieved successfully", data=InstitutionSetting.model_validate(settings_row))


@router.put("", response_model=APIResponse[InstitutionSetting])
async def update_settings(
    *,
    db: Session = Depends(deps.get_transactional_db),
    settings_in: InstitutionSettingUpdate,
    context: UserContext = Depends(require_admin)
):
    settings_row = institution_setting_service.update_settings(db, settings_in=settings_in)
    return APIResponse(message="Settings updated successfully", data=InstitutionSetting.model_validate(settings_row))
