from typing import List, Union
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.answer import SubmitRequest
from app.schemas.response import APIResponse
from app.schemas.submission import Submission, SubmissionDetail, SubmissionPublicDetail, SubmissionWithExam
from app.schemas.user import UserContext
from app.services.submission import SubmissionService
from app.utils import deps

router = APIRouter()

@router.get("/", response_model=APIResponse[List[SubmissionWithExam]])
async def get_submissions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    submission_service: SubmissionService = Depends(deps.get_submission_service),
    skip: int = 0,
    limit: int = 100
):
    """Admins see every submission; students see their own."""
    submissions = submission_service.list_submissions(db, current_user_context=context, skip=skip, limit=limit)
    return APIResponse(message="Submissions retrieved successfully", data=submissions)


@router.get("/{submission_id}", response_model=APIResponse[Union[SubmissionDetail, SubmissionPublicDetail]])
async def get_submission(
    *,
    db: Session = Depends(deps.get_db),
    submission_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context),
    submission_service: SubmissionService = Depends(deps.get_submission_service)
):
    submission = submission_service.get_submission(db, submission_id=submission_id, current_user_context=context)
    return APIResponse(message="Submission retrieved successfully", data=submission)


@router.post("/{submission_id}/submit", response_model=APIResponse[Submission])
async def submit_answers(
    *,
    db: Session = Depends(deps.get_transactional_db),
    submission_id: int,
    submit_in: SubmitRequest,
    context: UserContext = Depends(deps.get_current_user_with_context),
    submission_service: SubmissionService = Depends(deps.get_submission_service)
):
    """Submit answers and grade them. Used for manual submits and timer auto-submits."""
    submission = submission_service.submit(
        db, submission_id=submission_id, answers_in=submit_in.answers, current_user_context=context
    )
    return APIResponse(message="Answers submitted successfully", data=Submission.model_validate(submission))
