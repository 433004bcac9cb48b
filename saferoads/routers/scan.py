from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from saferoads.database import get_db
from saferoads.schemas.report import ReportResponse, ScanResponse
from saferoads.services import intake
from saferoads.services.assessment import assess
from saferoads.services.escalation import should_escalate
from saferoads.services.report_store import insert_report, list_reports
from saferoads.utils.exceptions import AppException, AssessmentError, IntakeError

router = APIRouter(tags=["reports"])

SCAN_FAILED = "AI Scan Failed"


@router.post("/scan")
async def scan(image: UploadFile = File(...), db: AsyncSession = Depends(get_db)):
    message = intake.validation_error(image.content_type, image.size)
    if message:
        raise AppException(message)

    try:
        image_b64 = await intake.read_as_base64(image)
        assessment = await assess(image_b64, mime_type=intake.mime_type_for(image.content_type))
    except (IntakeError, AssessmentError) as e:
        raise AppException(SCAN_FAILED) from e

    await insert_report(db, assessment.damage_score)

    return ScanResponse(
        success=True,
        damage_score=assessment.damage_score,
        auto_reported=should_escalate(assessment.damage_score),
    ).model_dump()


@router.get("/reports")
async def get_reports(db: AsyncSession = Depends(get_db)):
    reports = await list_reports(db)
    return [ReportResponse.model_validate(r).model_dump() for r in reports]
