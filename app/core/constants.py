from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"

class QuestionTypeEnum(str, Enum):
    MCQ = "MCQ"
    SHORT_ANSWER = "SHORT_ANSWER"

class SubmissionStatusEnum(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

class NotificationTypeEnum(str, Enum):
    WELCOME = "WELCOME"
    NEW_EXAM = "NEW_EXAM"
    RESULT = "RESULT"
    SYSTEM = "SYSTEM"

MIN_MCQ_OPTIONS = 2
